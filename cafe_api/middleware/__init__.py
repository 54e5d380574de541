# Middleware package for the café API

from .request_id import RequestIDMiddleware

__all__ = ["RequestIDMiddleware"]
