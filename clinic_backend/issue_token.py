"""Print a signed bearer token for a user to stdout.

The role stored for the user (see ``PUT /auth/users/{uid}/role``) is stamped
into the token. Only meaningful with ``IDENTITY_PROVIDER=jwt``.

Usage:
    python -m clinic_backend.issue_token <uid> [--email EMAIL] [--name NAME]
"""
import argparse
import sys

from clinic_backend.auth.identity import JwtIdentityProvider
from clinic_backend.core import config
from clinic_backend.dependencies import get_document_store


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument('uid')
    parser.add_argument('--email', default='')
    parser.add_argument('--name', default='')
    args = parser.parse_args(argv)

    if config.IDENTITY_PROVIDER != 'jwt':
        print('Tokens are issued by Firebase when IDENTITY_PROVIDER is not jwt.', file=sys.stderr)
        sys.exit(1)

    provider = JwtIdentityProvider(get_document_store())
    print(provider.issue_token(args.uid, email=args.email, name=args.name))


if __name__ == '__main__':
    main()
