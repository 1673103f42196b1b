import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import argparse
import json
import os

import requests
from dotenv import load_dotenv

load_dotenv()


def main() -> None:
    """
    POST a listing payload (JSON file) to the admin API.

    Reads ADMIN_SECRET from the environment; the endpoint defaults to the
    local server on PORT and can be overridden with ADMIN_API_URL.
    """
    parser = argparse.ArgumentParser(description="Create a listing from a JSON payload file")
    parser.add_argument("--file", required=True, help="Path to the listing payload JSON")
    args = parser.parse_args()

    payload_path = Path(args.file).resolve()
    if not payload_path.exists():
        raise SystemExit(f"Payload file not found: {payload_path}")

    admin_secret = os.getenv("ADMIN_SECRET")
    if not admin_secret:
        raise SystemExit("ADMIN_SECRET is missing from the environment")

    port = int(os.getenv("PORT", "5050"))
    endpoint = os.getenv("ADMIN_API_URL", f"http://127.0.0.1:{port}/api/admin/listings")

    with open(payload_path) as f:
        payload = json.load(f)

    res = requests.post(endpoint, json=payload, headers={"X-Admin-Key": admin_secret}, timeout=60)
    try:
        body = res.json()
    except ValueError:
        body = {}

    if not res.ok:
        print(f"Request failed: {res.status_code} {res.reason}")
        print(json.dumps(body, indent=2))
        raise SystemExit(1)

    print("Listing created:")
    print(json.dumps(body.get("data"), indent=2))


if __name__ == "__main__":
    main()
