"""Print a bearer token for local testing of the document API.

Usage:
    python -m scripts.issue_dev_token <user_id> <role> [minutes]
role is the claim checked by the capability policy (Admin, Manager, Employee).
"""

import sys
from datetime import timedelta

from construction_docs.domain.enums import Role
from construction_docs.infrastructure.security.jwt import create_access_token


def main() -> None:
    if len(sys.argv) < 3:
        print(
            "Usage: python -m scripts.issue_dev_token <user_id> <role> [minutes]",
            file=sys.stderr,
        )
        sys.exit(1)
    user_id, role = sys.argv[1], sys.argv[2]
    if Role.parse(role) is None:
        print(
            f"Warning: role {role!r} is not one of {Role.values()}; it will be granted nothing",
            file=sys.stderr,
        )
    expires = timedelta(minutes=int(sys.argv[3])) if len(sys.argv) > 3 else None
    print(create_access_token({"sub": user_id, "role": role}, expires_delta=expires))


if __name__ == "__main__":
    main()
