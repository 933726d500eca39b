"""HTTP middleware: request size limit and request ID.

Applied in main app; last added = outermost.
"""

from construction_docs.middleware.request_id import RequestIDMiddleware
from construction_docs.middleware.request_size_limit import RequestSizeLimitMiddleware

__all__ = ["RequestIDMiddleware", "RequestSizeLimitMiddleware"]
