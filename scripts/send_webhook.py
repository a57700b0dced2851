"""Send a Mercado Pago style notification to the relay webhook.

Useful for checking that the relay logs and acknowledges arbitrary payloads.
"""

import argparse
import json
from pathlib import Path

import httpx


def sample_notification(payment_id: str) -> dict:
    return {
        "action": "payment.updated",
        "api_version": "v1",
        "type": "payment",
        "data": {"id": payment_id},
        "live_mode": False,
    }


def main() -> None:
    """Parse CLI args and send one webhook request."""

    parser = argparse.ArgumentParser(description="Send a webhook notification to the relay.")
    parser.add_argument("--base-url", default="http://localhost:3000")
    parser.add_argument("--method", default="POST")
    parser.add_argument("--payment-id", default="123")
    parser.add_argument("--json", dest="json_inline", default=None, help="Inline JSON payload")
    parser.add_argument("--file", dest="json_file", default=None, help="Path to JSON file")
    args = parser.parse_args()

    if args.json_inline and args.json_file:
        raise SystemExit("Provide at most one of --json or --file")

    if args.json_inline:
        payload = json.loads(args.json_inline)
    elif args.json_file:
        payload = json.loads(Path(args.json_file).read_text())
    else:
        payload = sample_notification(args.payment_id)

    resp = httpx.request(
        args.method,
        f"{args.base_url}/webhook/mercadopago",
        params={"type": "payment", "data.id": args.payment_id},
        json=payload,
        timeout=10.0,
    )
    print(f"status={resp.status_code} body={resp.text}")


if __name__ == "__main__":
    main()
