from __future__ import annotations
import boto3
from botocore.config import Config

def boto_config(connect_timeout: float, read_timeout: float) -> Config:
    # one attempt only; callers own the retry policy
    return Config(
        retries={"max_attempts": 1, "mode": "standard"},
        connect_timeout=connect_timeout,
        read_timeout=read_timeout,
    )

def cognito_idp_client(region: str, *, connect_timeout: float = 5, read_timeout: float = 10):
    return boto3.client("cognito-idp", region_name=region, config=boto_config(connect_timeout, read_timeout))

def bedrock_runtime(region: str, *, connect_timeout: float = 5, read_timeout: float = 25):
    return boto3.client("bedrock-runtime", region_name=region, config=boto_config(connect_timeout, read_timeout))
