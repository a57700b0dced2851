"""Create a PIX charge through a running relay and poll it until it settles.

Useful for manual end-to-end checks against Mercado Pago sandbox credentials.
"""

import argparse
import asyncio
import json
import time

import httpx

PENDING_STATUSES = {"pending", "in_process", "authorized"}


async def create_charge(client: httpx.AsyncClient, amount: float, description: str, reference: str | None):
    """POST /pix/create and return the decoded body."""

    payload = {"amount": amount, "description": description}
    if reference:
        payload["external_reference"] = reference
    resp = await client.post("/pix/create", json=payload)
    if resp.status_code != 200:
        raise SystemExit(f"create failed status={resp.status_code} body={resp.text}")
    return resp.json()


async def poll_status(client: httpx.AsyncClient, payment_id, interval: float, deadline: float):
    """Poll /pix/status/{id} until the payment leaves a pending state or time runs out."""

    while True:
        resp = await client.get(f"/pix/status/{payment_id}")
        body = resp.json()
        status = body.get("status")
        print(f"status={status} detail={body.get('status_detail')} http={resp.status_code}")
        if resp.status_code != 200 or status not in PENDING_STATUSES:
            return body
        if time.monotonic() + interval > deadline:
            return body
        await asyncio.sleep(interval)


async def run(base_url: str, amount: float, description: str, reference: str | None, interval: float, timeout: float):
    deadline = time.monotonic() + timeout
    async with httpx.AsyncClient(base_url=base_url, timeout=15.0) as client:
        charge = await create_charge(client, amount, description, reference)
        print(json.dumps({k: v for k, v in charge.items() if k != "qr_code_base64"}, indent=2))
        if charge.get("payment_id") is None:
            return
        final = await poll_status(client, charge["payment_id"], interval, deadline)
        print(json.dumps(final, indent=2))


def main() -> None:
    """Parse CLI args and run one create-then-poll cycle."""

    parser = argparse.ArgumentParser(description="Create a PIX charge and poll its status.")
    parser.add_argument("--base-url", default="http://localhost:3000")
    parser.add_argument("--amount", type=float, default=1.0)
    parser.add_argument("--description", default="pix-relay smoke test")
    parser.add_argument("--reference", default=None)
    parser.add_argument("--interval", type=float, default=5.0)
    parser.add_argument("--timeout", type=float, default=300.0)
    args = parser.parse_args()

    asyncio.run(
        run(args.base_url, args.amount, args.description, args.reference, args.interval, args.timeout)
    )


if __name__ == "__main__":
    main()
