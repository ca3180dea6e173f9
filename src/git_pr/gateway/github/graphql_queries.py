"""GraphQL queries for the GitHub API.

These are stored in a separate file to keep the implementation code clean
and make the queries easier to read and maintain.
"""

# Users that can be requested as reviewers on the current repository.
# gh substitutes :owner and :repo from the repository in the working directory.
ASSIGNABLE_USERS_QUERY = """query ($repo: String!, $owner: String!) {
  repository(name: $repo, owner: $owner) {
    assignableUsers(first: 100) {
      nodes {
        login
      }
    }
  }
}"""

# The most recent open pull requests authored by a user, across repositories
USER_OPEN_PRS_QUERY = """query ($login: String!) {
  user(login: $login) {
    pullRequests(last: 20, states: OPEN) {
      edges {
        node {
          id
          title
          resourcePath
          number
          body
        }
      }
    }
  }
}"""
