"""Cross-account credential resolution"""

import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .config import get_role_arn_pattern
from .logging import get_logger

log = get_logger("account")

REFRESH_MARGIN = timedelta(minutes=5)
SESSION_DURATION = 3600
DEFAULT_REGION = "us-east-1"


class AccountAccessError(Exception):
    """Role assumption into an account failed"""

    def __init__(self, account_id: str, role_arn: str, cause: Exception):
        self.account_id = account_id
        self.role_arn = role_arn
        super().__init__(f"assume role {role_arn}: {cause}")


@dataclass(frozen=True)
class AWSCredentials:
    access_key_id: str
    secret_access_key: str
    session_token: str
    expiration: datetime

    def fresh(self, now: Optional[datetime] = None) -> bool:
        now = now or datetime.now(timezone.utc)
        return now + REFRESH_MARGIN < self.expiration


class AccountContext:
    """Hands out boto3 sessions scoped to an account.

    The empty scope maps to the base session. Any other scope is an
    account id reached through the cross-account role, with credentials
    cached until five minutes before they expire.
    """

    def __init__(
        self,
        profile: Optional[str] = None,
        session: Optional[boto3.Session] = None,
        role_arn_pattern: Optional[str] = None,
        region: Optional[str] = None,
        regions: Optional[list[str]] = None,
    ):
        self.profile = profile
        self.session = session or boto3.Session(profile_name=profile, region_name=region)
        self.region = region or self.session.region_name or DEFAULT_REGION
        self.regions = regions or [self.region]
        self.role_arn_pattern = get_role_arn_pattern(role_arn_pattern)
        self._lock = threading.Lock()
        self._credentials: dict[str, AWSCredentials] = {}
        self._sessions: dict[str, boto3.Session] = {}

    def role_arn(self, account_id: str) -> str:
        return self.role_arn_pattern.format(account_id=account_id)

    def assume_role(self, account_id: str) -> AWSCredentials:
        with self._lock:
            cached = self._credentials.get(account_id)
        if cached is not None and cached.fresh():
            return cached

        role_arn = self.role_arn(account_id)
        log.debug("Assuming %s", role_arn)
        try:
            sts = self.session.client("sts", region_name=self.region)
            resp = sts.assume_role(
                RoleArn=role_arn,
                RoleSessionName=f"reachability-analyzer-{account_id}",
                DurationSeconds=SESSION_DURATION,
            )
        except (ClientError, BotoCoreError) as e:
            raise AccountAccessError(account_id, role_arn, e) from e

        c = resp["Credentials"]
        creds = AWSCredentials(
            access_key_id=c["AccessKeyId"],
            secret_access_key=c["SecretAccessKey"],
            session_token=c["SessionToken"],
            expiration=c["Expiration"],
        )
        with self._lock:
            self._credentials[account_id] = creds
            self._sessions.pop(account_id, None)
        return creds

    def resolve(self, scope: str) -> boto3.Session:
        """Session for an owner scope; empty scope is the base session."""
        if not scope:
            return self.session

        creds = self.assume_role(scope)
        with self._lock:
            session = self._sessions.get(scope)
            if session is None:
                session = boto3.Session(
                    aws_access_key_id=creds.access_key_id,
                    aws_secret_access_key=creds.secret_access_key,
                    aws_session_token=creds.session_token,
                    region_name=self.region,
                )
                self._sessions[scope] = session
        return session

    def client(self, scope: str, service: str, region: Optional[str] = None):
        return self.resolve(scope).client(service, region_name=region or self.region)
