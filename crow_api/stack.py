# AGPL-3.0 License

from typing import Any, Dict, Optional

from aws_cdk import Stack
from constructs import Construct

from crow_api.construct import CrowApi


class CrowApiStack(Stack):
    """Stack holding a single CrowApi built from crow_api_props."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        crow_api_props: Optional[Dict[str, Any]] = None,
        **kwargs
    ):
        super().__init__(scope, construct_id, **kwargs)

        self.api = CrowApi(self, 'crow-api', **(crow_api_props or {}))
