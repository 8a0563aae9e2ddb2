"""
Static analysis of controller sources.

Modules:
- patterns: Call-site patterns (RecordAPICall, raw SDK client, generic client)
- scanner: First-match search for an operation's call site
"""
