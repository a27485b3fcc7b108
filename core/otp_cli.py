#!/usr/bin/env python3
"""
otp_cli.py — CLI wrapper cho core (import QR, xem mã TOTP, xuất URI)

Cung cấp các subcommand:
- import : parse text quét từ QR (otpauth:// hoặc otpauth-migration://), in ra các tài khoản
- totp   : hiển thị mã TOTP cho một secret (--watch để tự làm mới theo step)
- uri    : in ra otpauth URI để import lại vào app Authenticator
"""

import argparse
import sys
import time

from core.errors import GenerationError
from core.importer import import_qr_data
from core.otp_core import TokenTicker, generate_totp, seconds_remaining
from core.otpauth import EXPORT_ISSUER, build_export_uri


# --- CLI command handlers ---
def cmd_import(args) -> int:
    result = import_qr_data(args.data)
    if not result.ok:
        print(f"[!] {result.message}")
        return 1
    print(f"[*] Found {len(result.entries)} account(s):\n")
    for entry in result.entries:
        print("Account:", entry.label)
        print("Issuer: ", entry.issuer)
        print("Secret: ", entry.secret)
        print("-" * 40)
    return 0


def cmd_totp(args) -> int:
    try:
        if not args.watch:
            now = time.time()
            print(f"TOTP: {generate_totp(args.secret, now)}  (valid ~{seconds_remaining(now):2d}s)")
            return 0

        ticker = TokenTicker(args.secret)
        print("Press Ctrl+C to quit. Code refreshes on every 30s boundary...\n")
        while True:
            now = time.time()
            code = ticker.tick(now)
            if code is not None:
                print(f"\nTOTP: {code}  (valid ~{ticker.remaining(now):2d}s)")
            else:
                print(f".. {ticker.remaining(now):2d}s left", end="\r", flush=True)
            time.sleep(1)
    except GenerationError as e:
        print(f"[!] {e}")
        return 1
    except KeyboardInterrupt:
        print("\nBye.")
        return 0


def cmd_uri(args) -> int:
    print(build_export_uri(args.user_info, args.secret, issuer=args.issuer))
    return 0


def cmd_help(args) -> int:
    print("'totp-manager -h' for help.")
    return 0


# --- Argparse builder ---
def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="TOTP manager: import QR data, show codes, export URIs")
    sub = p.add_subparsers(dest="cmd")
    p.set_defaults(func=cmd_help)

    # import
    pi = sub.add_parser("import", help="Parse otpauth:// or otpauth-migration:// QR text")
    pi.add_argument("data", help="Raw text decoded from the QR code")
    pi.set_defaults(func=cmd_import)

    # totp
    pt = sub.add_parser("totp", help="Show the current TOTP code for a Base32 secret")
    pt.add_argument("secret", help="Base32 secret")
    pt.add_argument("--watch", action="store_true", help="Keep refreshing on each 30s step")
    pt.set_defaults(func=cmd_totp)

    # uri
    pu = sub.add_parser("uri", help="Print an otpauth URI for an account")
    pu.add_argument("user_info", help="Account label")
    pu.add_argument("secret", help="Base32 secret")
    pu.add_argument("--issuer", default=EXPORT_ISSUER)
    pu.set_defaults(func=cmd_uri)

    return p


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
