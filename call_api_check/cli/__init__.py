"""
CLI Module.

Thin command-line layer in front of the REST daemon.

Architecture:
- arguments.py classifies the process arguments (tool options vs plugin parameters)
- client.py sends the check request over HTTP(S) with httpx
- main.py prints the result and exits with the plugin severity

Usage:
    call_api_check --help
    call_api_check -c Invoke-IcingaCheckCPU -- -Warning 80 -Critical 90
"""
