#!/usr/bin/env python3
"""
Dev helper: send a test SendEmail request to a running SES v2 Local emulator.

Builds a SendEmail v2 payload in one of the three content shapes and POSTs
it to /v2/email/outbound-emails.

Usage
-----
# Simple content, targeting localhost:8005
python scripts/send_test_email.py

# Raw MIME content with a file attached
python scripts/send_test_email.py --kind raw --file path/to/report.pdf

# Template content (the template is created first if it does not exist)
python scripts/send_test_email.py --kind template --data '{"name": "Ada"}'

# Print the payload without sending
python scripts/send_test_email.py --kind raw --dry-run

Environment / .env
------------------
HOST_PORT   Port of the emulator when --url is not given (default: 8005).
"""

import argparse
import base64
import json
import mimetypes
import os
import sys
import textwrap
from email.message import EmailMessage
from pathlib import Path

import httpx
from dotenv import load_dotenv

_TEMPLATE_NAME = "send-test-email"


# ---------------------------------------------------------------------------
# Payload builders
# ---------------------------------------------------------------------------

def _build_simple_payload(args: argparse.Namespace) -> dict:
    return {
        "FromEmailAddress": args.from_email,
        "Destination": {"ToAddresses": [args.to]},
        "Content": {
            "Simple": {
                "Subject": {"Data": args.subject},
                "Body": {
                    "Text": {"Data": "Hello from send_test_email.py"},
                    "Html": {"Data": "<p>Hello from <b>send_test_email.py</b></p>"},
                },
            }
        },
    }


def _build_raw_payload(args: argparse.Namespace) -> dict:
    msg = EmailMessage()
    msg["From"] = args.from_email
    msg["To"] = args.to
    msg["Subject"] = args.subject
    msg.set_content("Hello from send_test_email.py (raw)")

    if args.file:
        file_path = Path(args.file)
        content_type = mimetypes.guess_type(file_path.name)[0] or "application/octet-stream"
        maintype, subtype = content_type.split("/", 1)
        msg.add_attachment(
            file_path.read_bytes(), maintype=maintype, subtype=subtype, filename=file_path.name
        )

    return {
        "Content": {"Raw": {"Data": base64.b64encode(msg.as_bytes()).decode("ascii")}},
    }


def _build_template_payload(args: argparse.Namespace) -> dict:
    return {
        "FromEmailAddress": args.from_email,
        "Destination": {"ToAddresses": [args.to]},
        "Content": {
            "Template": {"TemplateName": _TEMPLATE_NAME, "TemplateData": args.data},
        },
    }


_PAYLOAD_BUILDERS = {
    "simple": _build_simple_payload,
    "raw": _build_raw_payload,
    "template": _build_template_payload,
}


def _ensure_template(base_url: str) -> None:
    """Create the demo template unless it already exists."""
    response = httpx.get(f"{base_url}/v2/email/templates/{_TEMPLATE_NAME}", timeout=30)
    if response.status_code == 200:
        return
    httpx.post(
        f"{base_url}/v2/email/templates",
        json={
            "TemplateName": _TEMPLATE_NAME,
            "TemplateContent": {
                "Subject": "Hi {{name}}",
                "Text": "Hello {{name}}, this is a template test.",
                "Html": "<p>Hello <b>{{name}}</b>, this is a template test.</p>",
            },
        },
        timeout=30,
    ).raise_for_status()


# ---------------------------------------------------------------------------
# Pretty printer
# ---------------------------------------------------------------------------

def _print_response(response) -> None:
    status = response.status_code
    symbol = "OK" if status == 200 else "FAIL"
    print(f"\n[{symbol}] HTTP {status}")
    try:
        print(json.dumps(response.json(), indent=2))
    except ValueError:
        print(response.text)


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main() -> int:
    project_root = Path(__file__).resolve().parent.parent
    load_dotenv(project_root / ".env")

    parser = argparse.ArgumentParser(
        prog="send_test_email.py",
        description="Send a test SendEmail request to SES v2 Local.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""\
            Examples:
              python scripts/send_test_email.py
              python scripts/send_test_email.py --kind raw --file report.pdf
              python scripts/send_test_email.py --kind template --data '{"name": "Ada"}'
        """),
    )
    parser.add_argument(
        "--url",
        default=f"http://localhost:{os.getenv('HOST_PORT', '8005')}",
        help="Emulator base URL (default: http://localhost:$HOST_PORT)",
    )
    parser.add_argument("--kind", default="simple", choices=list(_PAYLOAD_BUILDERS))
    parser.add_argument("--from", dest="from_email", default="sender@example.com")
    parser.add_argument("--to", default="recipient@example.com")
    parser.add_argument("--subject", default="Test email")
    parser.add_argument("--file", default=None, metavar="PATH", help="Attachment (raw only)")
    parser.add_argument("--data", default='{"name": "World"}', help="TemplateData JSON")
    parser.add_argument("--dry-run", action="store_true", help="Print the payload only.")

    args = parser.parse_args()

    if args.file and not Path(args.file).exists():
        print(f"ERROR: File not found: {args.file}", file=sys.stderr)
        return 1

    payload = _PAYLOAD_BUILDERS[args.kind](args)
    base_url = args.url.rstrip("/")
    endpoint = f"{base_url}/v2/email/outbound-emails"

    print(f"Kind      : {args.kind}")
    print(f"Endpoint  : {endpoint}")

    if args.dry_run:
        print("\n[DRY RUN] Payload:")
        print(json.dumps(payload, indent=2))
        return 0

    try:
        if args.kind == "template":
            _ensure_template(base_url)
        response = httpx.post(endpoint, json=payload, timeout=30)
        _print_response(response)
        return 0 if response.status_code == 200 else 1
    except httpx.ConnectError:
        print(
            f"\nERROR: Could not connect to {endpoint}\n"
            "Is the emulator running? Start it with:\n"
            "  ses-v2-local   (or: cd backend && uvicorn app.main:app --reload --port 8005)",
            file=sys.stderr,
        )
        return 1
    except httpx.HTTPError as exc:
        print(f"\nERROR: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
