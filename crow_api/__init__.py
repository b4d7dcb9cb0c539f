"""
crow-api: compile a directory tree into an API Gateway REST API.

Folders under the source directory become path segments and
get/post/put/delete folders become Lambda-backed methods. The CDK
construct lives in crow_api.construct (CrowApi) and crow_api.stack
(CrowApiStack); the compiler core below has no CDK dependency.
"""

from crow_api.compiler import ApiCompiler, CompiledApi
from crow_api.errors import CrowApiError, DuplicateReferenceError, UnknownReferenceError
from crow_api.props import CrowApiProps

__all__ = [
    'ApiCompiler',
    'CompiledApi',
    'CrowApiError',
    'CrowApiProps',
    'DuplicateReferenceError',
    'UnknownReferenceError',
]
