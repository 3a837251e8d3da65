#!/usr/bin/env python3
"""
Encrypted Images Command Line Interface

Usage:
    encrypted-images encrypt TEXT [--key KEY]
    encrypted-images decrypt CIPHERTEXT [--key KEY]
    encrypted-images create-image TEXT [--watermark NAME] [--output FILE]
    encrypted-images extract [IMAGE] [--input FILE] [--key KEY]
    encrypted-images --version
    encrypted-images --help
"""

import argparse
import logging
import sys
from typing import List, Optional

from . import __version__
from .exceptions import EncryptedImagesError
from .pipeline import Pipeline


class EncryptedImagesCLI:
    """Main CLI application."""

    def __init__(self, pipeline: Optional[Pipeline] = None):
        self.pipeline = pipeline or Pipeline()

    def run(self, args: List[str]) -> int:
        """Run the CLI with given arguments."""
        parser = self.create_parser()
        parsed = parser.parse_args(args)

        logging.basicConfig(
            level=logging.DEBUG if parsed.verbose else logging.WARNING,
            format="%(asctime)s %(name)s %(levelname)s: %(message)s",
        )

        if hasattr(parsed, 'func'):
            try:
                return parsed.func(parsed)
            except EncryptedImagesError as e:
                print(f"Error: {e}", file=sys.stderr)
                return 1
        else:
            parser.print_help()
            return 0

    def create_parser(self) -> argparse.ArgumentParser:
        """Create the argument parser."""
        parser = argparse.ArgumentParser(
            prog="encrypted-images",
            description="Encrypt text and pack it into PNG images",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
    encrypted-images encrypt ThisIsJustaTestString --key secret
    encrypted-images decrypt <ciphertext> --key secret
    encrypted-images create-image ThisIsJustaTestString --watermark bitcoin --output secret.png
    encrypted-images extract --input secret.png
            """
        )

        parser.add_argument(
            '--version',
            action='version',
            version=f'encrypted-images v{__version__}'
        )
        parser.add_argument('--verbose', '-v', action='store_true',
                            help='Enable debug logging')

        subparsers = parser.add_subparsers(title='commands', dest='command')

        self.add_encrypt_command(subparsers)
        self.add_decrypt_command(subparsers)
        self.add_create_image_command(subparsers)
        self.add_extract_command(subparsers)

        return parser

    def add_encrypt_command(self, subparsers):
        cmd = subparsers.add_parser('encrypt', help='Encrypt alphabet text')
        cmd.add_argument('text', help='Plaintext (A-Z, a-z, 0-9, +, /)')
        cmd.add_argument('--key', '-k', help='Passphrase (default key if omitted)')
        cmd.set_defaults(func=self.handle_encrypt)

    def add_decrypt_command(self, subparsers):
        cmd = subparsers.add_parser('decrypt', help='Decrypt ciphertext')
        cmd.add_argument('ciphertext', help='Ciphertext produced by encrypt')
        cmd.add_argument('--key', '-k', help='Passphrase (default key if omitted)')
        cmd.set_defaults(func=self.handle_decrypt)

    def add_create_image_command(self, subparsers):
        cmd = subparsers.add_parser('create-image', help='Encrypt text into a PNG image')
        cmd.add_argument('text', help='Plaintext (A-Z, a-z, 0-9, +, /)')
        cmd.add_argument('--watermark', '-w', default='',
                         help='bitcoin, ethereum or cardano (none otherwise)')
        cmd.add_argument('--output', '-o',
                         help='PNG file to write (default: print base64 to stdout)')
        cmd.set_defaults(func=self.handle_create_image)

    def add_extract_command(self, subparsers):
        cmd = subparsers.add_parser('extract', help='Recover text from a PNG image')
        source = cmd.add_mutually_exclusive_group(required=True)
        source.add_argument('image', nargs='?', help='Base64 PNG string')
        source.add_argument('--input', '-i', help='PNG file to read')
        cmd.add_argument('--key', '-k', help='Passphrase (default key if omitted)')
        cmd.set_defaults(func=self.handle_extract)

    # Command handlers

    def handle_encrypt(self, args):
        """Handle encrypt command."""
        print(self.pipeline.encrypt_text(args.text, args.key))
        return 0

    def handle_decrypt(self, args):
        """Handle decrypt command."""
        print(self.pipeline.decrypt_text(args.ciphertext, args.key))
        return 0

    def handle_create_image(self, args):
        """Handle create-image command."""
        pixels = self.pipeline.create_pixels(args.text, args.watermark)
        if args.output:
            self.pipeline.container.save(pixels, args.output)
            print(f"Image written to {args.output}")
        else:
            print(self.pipeline.container.serialize(pixels))
        return 0

    def handle_extract(self, args):
        """Handle extract command."""
        if args.input:
            result = self.pipeline.extract_from_pixels(self.pipeline.container.load(args.input))
        else:
            result = self.pipeline.extract_ciphertext(args.image)
        print(self.pipeline.decrypt_text(result.ciphertext, args.key))
        return 0


def main():
    """Main entry point."""
    cli = EncryptedImagesCLI()
    sys.exit(cli.run(sys.argv[1:]))


if __name__ == "__main__":
    main()
