# scripts/make_jwt.py
import json
import logging
import os
import sys

from minijwt.tokens import jwt


def main(argv: list[str]) -> int:
    if len(argv) < 2:
        print("Usage: python scripts/make_jwt.py <payload-json> [secret]", file=sys.stderr)
        return 1
    payload = argv[1]
    secret = argv[2] if len(argv) > 2 else os.getenv("JWT_SECRET", "dev-secret")
    try:
        json.loads(payload)
    except json.JSONDecodeError:
        logging.warning("payload is not JSON; signing it as opaque text")

    token = jwt.encode(payload, secret)
    print(f"token                 : {token}")
    print(f"verify correct secret : {'ok' if jwt.verify(token, secret) else 'fail'}")
    print(f"verify wrong secret   : {'ok' if jwt.verify(token, secret + '-wrong') else 'fail'}")
    print(f"decoded (unverified)  : {jwt.decode_without_verify(token).decode('utf-8', errors='replace')}")
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    sys.exit(main(sys.argv))
