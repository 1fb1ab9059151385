"""Authentication — session identity, bearer token inspection, login/logout."""
