"""
GraphQL Query Definitions — Queries used against the Record360 v2 API.

  COMPANY_SEARCH_QUERY     Up to $first company names matching $name (the
                           autocomplete lookup).
  COMPANY_TRIGGERS_QUERY   The company node with its triggers plus the first
                           page of locations (with workflow bodies) and users.
  LOCATIONS_PAGE_QUERY     A further page of the company's locations.
  USERS_PAGE_QUERY         A further page of the company's users.

Company lookups are by exact name with first: 1, so the page queries re-select
the same company and advance one connection with $after.

Notes on the payload:
  - `triggers` is a JSON scalar: a list whose items are JSON-encoded strings
    or objects.
  - `workflow.body` is a JSON scalar holding {"template": {"modules": [...]}}.

Pipeline context:
  Used in Step 2 of the orchestrator pipeline by Record360Client. The
  assembled company node is passed to EntityExtractor (Step 3).
"""

COMPANY_SEARCH_QUERY = """
query CompanySearch($name: String!, $first: Int!) {
  companies(first: $first, name: $name) {
    edges {
      node {
        name
      }
    }
  }
}
"""

LOCATION_FIELDS = """
      pageInfo {
        hasNextPage
        endCursor
      }
      edges {
        node {
          id
          name
          demo
          active
          workflow {
            body
          }
        }
      }
"""

USER_FIELDS = """
      pageInfo {
        hasNextPage
        endCursor
      }
      edges {
        node {
          id
          name
          email
        }
      }
"""

COMPANY_TRIGGERS_QUERY = """
query CompanyTriggers($name: String!, $pageSize: Int!) {
  companies(first: 1, name: $name) {
    edges {
      node {
        id
        name
        triggers
        locations(first: $pageSize) {%s    }
        users(first: $pageSize) {%s    }
      }
    }
  }
}
""" % (LOCATION_FIELDS, USER_FIELDS)

LOCATIONS_PAGE_QUERY = """
query CompanyLocationsPage($name: String!, $pageSize: Int!, $after: String!) {
  companies(first: 1, name: $name) {
    edges {
      node {
        locations(first: $pageSize, after: $after) {%s    }
      }
    }
  }
}
""" % LOCATION_FIELDS

USERS_PAGE_QUERY = """
query CompanyUsersPage($name: String!, $pageSize: Int!, $after: String!) {
  companies(first: 1, name: $name) {
    edges {
      node {
        users(first: $pageSize, after: $after) {%s    }
      }
    }
  }
}
""" % USER_FIELDS
