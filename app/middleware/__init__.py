# Middleware package for the identity API

from .request_id import RequestIDMiddleware

__all__ = ["RequestIDMiddleware"]
