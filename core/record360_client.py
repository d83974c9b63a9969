"""
Record360 API Client — Handles login and GraphQL calls to the Record360 API.

This module is responsible for all HTTP communication with Record360. It uses
two API surfaces:

  1. Login endpoint — Exchanges a username/password for an opaque bearer token.

  2. GraphQL API — Company search and the company trigger extraction.

Authentication flow:
    POST https://api.record360.com/api/users/authenticate
    Headers: Accept: application/json; version=1
    Body: {"user": {"username": "ops@acme.com", "password": "..."}}
    Response: {"auth_token": "..."}

    The token is kept on a Session object and attached as a Bearer header to
    all subsequent GraphQL requests.

Pagination:
    Locations and users are GraphQL connections. fetch_company() keeps asking
    for the next page while pageInfo.hasNextPage is true, then returns the
    company node with every edge collected.

Pipeline context:
    This is used in Step 1 (authentication) and Step 2 (GraphQL extraction)
    of the orchestrator pipeline, and by `run.py --search`.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests

from .graphql_queries import (
    COMPANY_SEARCH_QUERY,
    COMPANY_TRIGGERS_QUERY,
    LOCATIONS_PAGE_QUERY,
    USERS_PAGE_QUERY,
)

DEFAULT_TIMEOUT = 30
SEARCH_LIMIT = 20


class AuthenticationError(RuntimeError):
    """Raised when the login endpoint does not hand back a token."""


class CompanyNotFoundError(LookupError):
    """Raised when no company matches the requested name."""


@dataclass
class Session:
    """Holds the bearer token for the current operator.

    Attributes:
        token: Opaque API token, or None until logged in.
    """
    token: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)


class Record360Client:
    """Client for the Record360 login endpoint and GraphQL API.

    Manages a requests.Session; the bearer token comes from the Session
    object, which may be pre-populated with a token from configuration.

    Attributes:
        api_url: GraphQL endpoint URL.
        auth_url: Login endpoint URL.
        session: The operator Session holding the bearer token.
        debug: If True, print verbose request/response details.
    """

    def __init__(
        self,
        api_url: str,
        auth_url: str,
        session: Optional[Session] = None,
        debug: bool = False,
    ):
        self.api_url = api_url
        self.auth_url = auth_url
        self.session = session or Session()
        self.debug = debug
        self._http = requests.Session()

    def authenticate(self, username: str, password: str) -> str:
        """Log in and store the returned token on the session.

        Returns:
            The token string.

        Raises:
            requests.HTTPError: If the login request fails (e.g., 401).
            AuthenticationError: If the response carries no auth_token.
        """
        payload = {"user": {"username": username, "password": password}}
        headers = {
            "Accept": "application/json; version=1",
            "Content-Type": "application/json",
        }

        if self.debug:
            print(f"  Authenticating as: {username}")

        response = self._http.post(self.auth_url, json=payload, headers=headers, timeout=DEFAULT_TIMEOUT)
        response.raise_for_status()

        token = response.json().get("auth_token")
        if not token:
            raise AuthenticationError("Login failed. Please check your credentials.")

        self.session.token = token

        if self.debug:
            print(f"  Authentication successful, token: {token[:8]}...")

        return token

    def execute_graphql(self, query: str, variables: Optional[Dict] = None) -> Dict[str, Any]:
        """Execute a GraphQL query.

        Returns:
            The "data" portion of the GraphQL response (a dict).

        Raises:
            AuthenticationError: If no token is available.
            RuntimeError: If the GraphQL response contains errors.
            requests.HTTPError: If the HTTP request fails.
        """
        if not self.session.is_authenticated:
            raise AuthenticationError("Not logged in: no API token available")

        payload = {"query": query}
        if variables:
            payload["variables"] = variables

        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.session.token}",
        }

        if self.debug:
            print(f"  Executing GraphQL query ({len(query)} chars) {variables or ''}")

        response = self._http.post(self.api_url, json=payload, headers=headers, timeout=DEFAULT_TIMEOUT)
        response.raise_for_status()

        result = response.json()

        if result.get("errors"):
            error_messages = [e.get("message", str(e)) for e in result["errors"]]
            raise RuntimeError(f"GraphQL errors: {'; '.join(error_messages)}")

        return result.get("data") or {}

    def search_companies(self, name: str, limit: int = SEARCH_LIMIT) -> List[str]:
        """Return up to `limit` company names matching `name`.

        A blank name returns an empty list without calling the API.
        """
        if not name.strip():
            return []

        data = self.execute_graphql(COMPANY_SEARCH_QUERY, {"name": name, "first": limit})
        edges = (data.get("companies") or {}).get("edges") or []
        return [edge["node"]["name"] for edge in edges if edge.get("node")]

    def fetch_company(self, name: str, page_size: int = 100) -> Dict[str, Any]:
        """Fetch a company node with its triggers and all locations and users.

        Raises:
            CompanyNotFoundError: If no company has this name.
        """
        data = self.execute_graphql(COMPANY_TRIGGERS_QUERY, {"name": name, "pageSize": page_size})
        company = self._first_company(data)
        if company is None:
            raise CompanyNotFoundError("Company not found.")

        for connection, query in (("locations", LOCATIONS_PAGE_QUERY), ("users", USERS_PAGE_QUERY)):
            first_page = company.get(connection) or {}
            company[connection] = {
                "edges": self._collect_pages(name, connection, query, first_page, page_size)
            }

        if self.debug:
            print(f"  Fetched company {company.get('name')}: "
                  f"{len(company['locations']['edges'])} locations, "
                  f"{len(company['users']['edges'])} users")

        return company

    def _collect_pages(
        self,
        name: str,
        connection: str,
        query: str,
        first_page: Dict[str, Any],
        page_size: int,
    ) -> List[Dict]:
        """Follow a connection's cursor until hasNextPage is false."""
        edges = list(first_page.get("edges") or [])
        page_info = first_page.get("pageInfo") or {}
        seen_cursors = set()

        while page_info.get("hasNextPage"):
            cursor = page_info.get("endCursor")
            if not cursor or cursor in seen_cursors:
                break
            seen_cursors.add(cursor)

            data = self.execute_graphql(query, {"name": name, "pageSize": page_size, "after": cursor})
            company = self._first_company(data) or {}
            page = company.get(connection) or {}
            edges.extend(page.get("edges") or [])
            page_info = page.get("pageInfo") or {}

            if self.debug:
                print(f"  Fetched {connection} page after {cursor}: {len(edges)} so far")

        return edges

    @staticmethod
    def _first_company(data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        edges = (data.get("companies") or {}).get("edges") or []
        if not edges:
            return None
        return edges[0].get("node")
