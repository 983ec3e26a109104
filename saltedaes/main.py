import argparse
import getpass
import logging
import os
import sys
from typing import List, Optional

from .core.aes_crypt import AesCrypt
from .core.errors import SaltedAesError
from .core.format_config import KEY_SIZES
from .core.options import EncryptionOptions, PaddingMode, PasswordHash
from .utils.logger import configure_logging

logger = logging.getLogger(__name__)

PASSPHRASE_ENV = "SALTEDAES_PASSPHRASE"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="saltedaes", description="Passphrase-based AES encryption with a random salt")
    parser.add_argument("--debug", action="store_true", help="Log debug output to the console and log file")
    parser.add_argument("--log-dir", help="Directory for saltedaes.log (default: per-user data dir)")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("text", nargs="?", help="Input text. Read from stdin when omitted.")
    common.add_argument(
        "--passphrase",
        help=f"Passphrase (16, 24 or 32 bytes without --key-size). Falls back to {PASSPHRASE_ENV}, then a prompt.",
    )
    common.add_argument("--iv", help="16-byte initialization vector. Enables CBC mode (ECB otherwise).")
    common.add_argument("--key-size", type=int, choices=KEY_SIZES, help="Fixed key size in bits")
    common.add_argument(
        "--hash",
        default=PasswordHash.SHA1.value,
        choices=[member.value for member in PasswordHash],
        help="Password hash used to derive the key (default: sha1)",
    )
    common.add_argument("--iterations", type=int, default=1, help="Password hash iterations (default: 1)")
    common.add_argument("--hash-salt", default="", help="Password hash salt (default: empty)")
    common.add_argument("--min-salt", type=int, default=0, help="Minimum random salt length (default: 0)")
    common.add_argument("--max-salt", type=int, default=0, help="Maximum random salt length, 0 disables salting")
    common.add_argument(
        "--padding",
        default=PaddingMode.PKCS7.value,
        choices=[member.value for member in PaddingMode],
        help="Block padding mode (default: pkcs7)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("encrypt", parents=[common], help="Encrypt text, print base64 cipher text")
    subparsers.add_parser("decrypt", parents=[common], help="Decrypt base64 cipher text, print text")
    return parser


def _resolve_passphrase(args: argparse.Namespace) -> str:
    if args.passphrase:
        return args.passphrase
    env_value = os.getenv(PASSPHRASE_ENV)
    if env_value:
        return env_value
    return getpass.getpass("Passphrase: ")


def _read_input(args: argparse.Namespace) -> str:
    if args.text is not None:
        return args.text
    return sys.stdin.read().rstrip("\r\n")


def options_from_args(args: argparse.Namespace) -> EncryptionOptions:
    return EncryptionOptions(
        fixed_key_size=args.key_size,
        password_hash=args.hash,
        password_hash_iterations=args.iterations,
        min_salt_length=args.min_salt,
        max_salt_length=args.max_salt,
        password_hash_salt=args.hash_salt,
        padding_mode=args.padding,
    )


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.debug, log_dir=args.log_dir)

    try:
        options = options_from_args(args)
        crypt = AesCrypt(_resolve_passphrase(args), args.iv, options)
        with crypt:
            if args.command == "encrypt":
                output = crypt.encrypt(_read_input(args))
            else:
                output = crypt.decrypt(_read_input(args).strip())
    except SaltedAesError as e:
        logger.error(f"{args.command} failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(output)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
