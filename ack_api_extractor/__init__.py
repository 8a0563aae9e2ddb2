"""
ack-api-extractor: AWS API operation coverage for ACK controllers.

Reads a service's Smithy API model, finds where each operation is called in
the matching ``<service>-controller`` source tree, and writes a per-service
operations report.

Main features:
- Operation extraction from service and operation shapes
- Implementation detection by scanning controller Go sources
- Optional LLM classification of unimplemented operations (control/data plane)
- Optional least-privilege IAM policy for implemented operations
"""

__version__ = "0.1.0"
