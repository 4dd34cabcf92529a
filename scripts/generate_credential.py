#!/usr/bin/env python3
"""Script to generate an ID token credential and add it to the store"""

import argparse
import sys

from oidc_provider.core.algorithms import KeyAlgorithm
from oidc_provider.core.config import settings
from oidc_provider.services.credential_store import CredentialStore
from oidc_provider.utils.validators import validate_issuer_url


def generate_credential(
    store: CredentialStore,
    credential_id: str,
    algorithm: KeyAlgorithm,
    issuer: str | None = None,
    audience: str | None = None,
    description: str | None = None,
) -> None:
    """
    Generate a credential and append it to the store

    Args:
        store: Credential store to update
        credential_id: Credential ID (JWT kid)
        algorithm: Signing algorithm
        issuer: Issuer URL override
        audience: Audience override
        description: Description
    """
    credentials = store.load()
    if any(c.id == credential_id for c in credentials):
        raise ValueError(f"Credential '{credential_id}' already exists")

    print(f"Generating {algorithm.value} key pair for '{credential_id}'...")
    credential = store.create(
        credential_id,
        algorithm,
        issuer=issuer,
        audience=audience,
        description=description,
    )
    store.save([*credentials, credential])

    print(f"✓ Credential saved to: {store.path}")
    if credential.issuer is not None:
        print(f"✓ Serve discovery and JWKS for {credential.issuer} yourself (see /admin/credentials/check-issuer)")
    else:
        print(f"✓ Public key published at: {settings.root_issuer_url}/jwks")


def main():
    """Main entry point"""
    parser = argparse.ArgumentParser(description="Generate an ID token credential")
    parser.add_argument("id", help="Credential ID")
    parser.add_argument(
        "--algorithm",
        "-a",
        default=KeyAlgorithm.RS256.value,
        choices=[a.value for a in KeyAlgorithm],
        help="Signing algorithm (default: RS256)",
    )
    parser.add_argument("--issuer", help="Issuer URL override")
    parser.add_argument("--audience", help="Audience override")
    parser.add_argument("--description", help="Description")
    parser.add_argument(
        "--store",
        "-s",
        default=settings.credentials_path,
        help=f"Credentials file (default: {settings.credentials_path})",
    )

    args = parser.parse_args()

    if args.issuer:
        is_valid, error = validate_issuer_url(args.issuer)
        if not is_valid:
            parser.error(error)

    try:
        generate_credential(
            CredentialStore(args.store),
            args.id,
            KeyAlgorithm(args.algorithm),
            issuer=args.issuer,
            audience=args.audience,
            description=args.description,
        )
    except ValueError as e:
        print(f"✗ {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
