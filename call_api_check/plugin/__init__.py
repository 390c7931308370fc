"""
Check Plugin Protocol.

Pure functions that translate between the command line, the daemon's
request body and its check result payload:

- values.py   - typed parameter values and the token parser
- binder.py   - binds `-Name value` pairs into a PluginInvocation
- request.py  - encodes the invocation into a CheckRequest
- response.py - decodes the daemon response into a CheckResult
"""
