"""Secrets Manager access for database credentials."""

from __future__ import annotations

import json
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from rdsconnect.exceptions import CredentialFetchError
from rdsconnect.models import Credentials


class SecretsFetcher:
    """Fetch and decode credential secrets.

    Parameters
    ----------
    session : Any
        boto3 session bound to the profile. Clients are created per region
        because DR replica secrets live in the home region.
    """

    def __init__(self, session: Any) -> None:
        self.session = session

    def fetch(self, secret_name: str, region: str) -> Credentials:
        """Return the credentials stored in secret_name.

        Parameters
        ----------
        secret_name : str
            Secret identifier (e.g. ``root/master-db/psql``)
        region : str
            Region the secret lives in

        Returns
        -------
        Credentials
            Username and password from the secret payload

        Raises
        ------
        CredentialFetchError
            If the lookup fails or the payload is not a JSON object with
            string ``username`` and ``password`` fields
        """
        try:
            client = self.session.client("secretsmanager", region_name=region)
            response = client.get_secret_value(SecretId=secret_name)
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "ClientError")
            raise CredentialFetchError(secret_name, region, code) from e
        except BotoCoreError as e:
            raise CredentialFetchError(secret_name, region, str(e)) from e

        secret_string = response.get("SecretString")
        if not secret_string:
            raise CredentialFetchError(secret_name, region, "secret has no string value")

        try:
            payload = json.loads(secret_string)
        except json.JSONDecodeError as e:
            raise CredentialFetchError(secret_name, region, "secret is not valid JSON") from e

        if not isinstance(payload, dict):
            raise CredentialFetchError(secret_name, region, "secret is not a JSON object")

        username = payload.get("username")
        password = payload.get("password")

        if not isinstance(username, str) or not isinstance(password, str):
            raise CredentialFetchError(
                secret_name, region, "secret lacks username or password"
            )

        return Credentials(username=username, password=password)
