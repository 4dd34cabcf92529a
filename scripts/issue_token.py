#!/usr/bin/env python3
"""Script to print an ID token for a stored credential"""

import argparse
import sys

from oidc_provider.core.config import settings
from oidc_provider.core.dependencies import build_issuer_resolver
from oidc_provider.schemas.credential import ExecutionContext
from oidc_provider.services.credential_store import CredentialStore
from oidc_provider.services.token_service import TokenService


def main():
    """Main entry point"""
    parser = argparse.ArgumentParser(description="Issue an ID token for a stored credential")
    parser.add_argument("id", help="Credential ID")
    parser.add_argument("--subject", help="Job URL; omit to issue outside of a build")
    parser.add_argument("--build-number", type=int, help="Build number (requires --subject)")
    parser.add_argument("--store", "-s", default=settings.credentials_path, help="Credentials file")

    args = parser.parse_args()

    if (args.subject is None) != (args.build_number is None):
        parser.error("--subject and --build-number must be given together")

    credentials = CredentialStore(args.store).load()
    credential = next((c for c in credentials if c.id == args.id), None)
    if credential is None:
        print(f"✗ No credential '{args.id}' in {args.store}", file=sys.stderr)
        sys.exit(1)

    context = None
    if args.subject is not None:
        context = ExecutionContext(subject=args.subject, build_number=args.build_number)

    token_service = TokenService(build_issuer_resolver(credentials))
    print(token_service.issue(credential, context))


if __name__ == "__main__":
    main()
