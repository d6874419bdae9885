"""The Command Line Interface for the utility, including Interactive elements.

A hybrid CLI/ICLI (Command Line Interface/Interactive Command Line Interface): whatever the command line leaves out is
asked for interactively, unless non-interactive mode is requested, in which case defaults are used or the run fails.

Typical usage example:

    rsacore keygen --nlen 2048
    rsacore -n encrypt --e 65537 --n 3233 --message 65
    python -m rsacore
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import argparse
import sys
import typing

import rsacore
from rsacore import backends
from rsacore import keygen as kg
from rsacore import rsa
from rsacore.errors import InvalidParameterError
from rsacore.errors import KeyConstructionError

EXIT_INVALID_PARAMETER = 2
EXIT_KEY_CONSTRUCTION = 3


class HelpData(typing.NamedTuple):
    description: str
    format: typing.Type = str
    choices: list[str] | None = None
    default: typing.Any = None
    advanced: bool = False
    optional: bool = False


help_dict: dict[str, HelpData] = {
    "subcommand":
        HelpData(
            description="The available subcommands in rsacore.",
            choices=["keygen", "encrypt", "decrypt"],
        ),
    "keygen":
        HelpData("Keypair generation utility."),
    "encrypt":
        HelpData("Textbook encryption of an integer (or text) message."),
    "decrypt":
        HelpData("Textbook decryption of an integer ciphertext."),
    "nlen":
        HelpData(
            description="Modulus size (in bits).",
            format=int,
            default=3072,
        ),
    "backend":
        HelpData(
            description="Big-integer backend to compute with.",
            choices=list(backends.BACKENDS),
            default=backends.DEFAULT_BACKEND,
            advanced=True,
        ),
    "seed":
        HelpData(
            description="Seed for reproducible key generation. Leave empty for an OS-seeded generator.",
            format=int,
            advanced=True,
            optional=True,
        ),
    "attempts":
        HelpData(
            description="How many times to retry with fresh primes if key construction fails.",
            format=int,
            default=1,
            advanced=True,
        ),
    "totient":
        HelpData(
            description="Totient the private exponent is computed over.",
            choices=list(kg.TOTIENTS),
            default="carmichael",
            advanced=True,
        ),
    "e":
        HelpData(
            description="Public exponent of the key.",
            format=int,
            default=kg.PUBLIC_EXPONENT,
        ),
    "d":
        HelpData(
            description="Private exponent of the key.",
            format=int,
        ),
    "n":
        HelpData(
            description="Modulus of the key.",
            format=int,
        ),
    "message":
        HelpData(
            description="Integer message representative, or text with --text.",
            format=str,
        ),
    "text":
        HelpData(
            description="Whether to treat the message as UTF-8 text.",
            format=bool,
            advanced=True,
            default=False,
        ),
}

needs = {
    "keygen": ("nlen", "backend", "seed", "attempts", "totient"),
    "encrypt": ("e", "n", "message", "text", "backend"),
    "decrypt": ("d", "n", "message", "text", "backend"),
}

modulus = argparse.ArgumentParser(add_help=False)
modulus.add_argument("--n", type=help_dict["n"].format, help=help_dict["n"].description)
payloads = argparse.ArgumentParser(add_help=False)
payloads.add_argument("--message", "-m", type=help_dict["message"].format, help=help_dict["message"].description)
payloads.add_argument("--text", "-t", action="store_true", help=help_dict["text"].description)
backp = argparse.ArgumentParser(add_help=False)
backp.add_argument("--backend", "-b", choices=help_dict["backend"].choices, help=help_dict["backend"].description)
corep = argparse.ArgumentParser(prog="rsacore")
corep.add_argument("--version", "-v", action="version", version=f"%(prog)s {rsacore.__version__}")
corep.add_argument("--non-interactive", "-n", action="store_true", help="Enable non-interactive mode")
corep.add_argument("--advanced", "-a", action="store_true", help="Enable advanced mode, for interactive mode")
commands = corep.add_subparsers(dest="subcommand", title="Subcommands")

keygen = commands.add_parser("keygen", parents=[backp], help=help_dict["keygen"].description)
keygen.add_argument("--nlen", "-s", type=help_dict["nlen"].format, help=help_dict["nlen"].description)
keygen.add_argument("--seed", type=help_dict["seed"].format, help=help_dict["seed"].description)
keygen.add_argument("--attempts", type=help_dict["attempts"].format, help=help_dict["attempts"].description)
keygen.add_argument("--totient", choices=help_dict["totient"].choices, help=help_dict["totient"].description)

encrypt = commands.add_parser("encrypt", parents=[modulus, payloads, backp], help=help_dict["encrypt"].description)
encrypt.add_argument("--e", type=help_dict["e"].format, help=help_dict["e"].description)
decrypt = commands.add_parser("decrypt", parents=[modulus, payloads, backp], help=help_dict["decrypt"].description)
decrypt.add_argument("--d", type=help_dict["d"].format, help=help_dict["d"].description)


def checkmodes(arg: str, mode: tuple[bool, bool]):
    helper_data = help_dict[arg]
    if mode[0] or (helper_data.advanced and not mode[1]):
        if helper_data.default is not None or helper_data.optional:
            return helper_data.default
        if mode[0]:
            raise InvalidParameterError(f"Argument {arg} is missing and non-interactive mode is active.")
    return helper_data


def choice_handler(arg: str, mode: tuple[bool, bool], prntr: typing.Callable = print):
    helper_data = checkmodes(arg, mode)
    if not isinstance(helper_data, HelpData):
        return helper_data
    prntr(f"Please specify the {arg}!")
    prntr("Description: " + helper_data.description)
    vald = set(helper_data.choices)
    for choice in helper_data.choices:
        defstring = " (Default)" if choice == helper_data.default else ""
        if help_dict.get(choice, None):
            prntr(f"{choice} - {help_dict[choice].description}" + defstring)
        else:
            prntr(f"{choice}" + defstring)
    if helper_data.default is not None:
        prntr("To accept default just click enter. Otherwise specify value.")
    while True:
        ch = input(f"{arg}: ")
        if ch in vald:
            return ch
        if not ch and helper_data.default is not None:
            return helper_data.default
        prntr("Please select an option from the list.")


def input_handler(arg: str, mode: tuple[bool, bool], prntr: typing.Callable = print):
    helper_data = checkmodes(arg, mode)
    if not isinstance(helper_data, HelpData):
        return helper_data
    prntr(f"Please specify the {arg}!")
    prntr("Description: " + helper_data.description)
    if helper_data.default is not None:
        prntr(f"Default value: {helper_data.default}")
        prntr("To accept default just click enter. Otherwise specify value.")
    cls = helper_data.format
    while True:
        ch = input(f"{arg}: ")
        if not ch and (helper_data.default is not None or helper_data.optional):
            return helper_data.default
        if ch == "":
            prntr("Please provide a value.")
            continue
        try:
            return cls(ch)
        except ValueError:
            prntr(f"We could not convert your value to {cls.__name__}.")


def parse_message(message: str, text: bool) -> int:
    """Marshal the message argument into its integer representative."""
    if text:
        return rsa.bytes_to_integer(message.encode("utf-8"))
    try:
        return int(message)
    except ValueError:
        raise InvalidParameterError(f"Message {message!r} is not an integer. Use --text for text.") from None


def run(args: argparse.Namespace, pspr: typing.Callable = print) -> None:
    """Execute the fully populated subcommand."""
    match args.subcommand:
        case "keygen":
            pub, priv = rsacore.generate_keypair(args.nlen,
                                                 backend=args.backend,
                                                 seed=args.seed,
                                                 attempts=args.attempts,
                                                 totient=args.totient)
            pspr("\nKey pair generated!")
            print(f"e={pub.e}")
            print(f"d={priv.d}")
            print(f"n={pub.n}")
        case "encrypt":
            key = rsa.PublicKey(args.e, args.n)
            message = rsa.check_representative(parse_message(args.message, args.text), key.n)
            ciph = rsa.encrypt(message, key, args.backend)
            pspr("Ciphertext:")
            print(ciph)
        case "decrypt":
            key = rsa.PrivateKey(args.d, args.n)
            ciph = rsa.check_representative(parse_message(args.message, False), key.n)
            clear = rsa.decrypt(ciph, key, args.backend)
            if args.text:
                try:
                    clear = rsa.integer_to_bytes(clear).decode("utf-8")
                except UnicodeDecodeError:
                    raise InvalidParameterError("Cleartext is not valid UTF-8 text; omit --text.") from None
            pspr("Cleartext:")
            print(clear)


def main(argv: list[str] | None = None) -> None:
    """Core Hybrid CLI/ICLI (Command Line Interface/Interactive Command Line Interface)"""
    args = corep.parse_args(argv)
    pstatus = (args.non_interactive, args.advanced)

    def pspr(text: str):
        """Print only if not in non-interactive mode."""
        if not pstatus[0]:
            print(text)

    pspr("Welcome to rsacore!\n")
    try:
        if not args.subcommand:
            args.subcommand = choice_handler("subcommand", pstatus)
        for reqs in needs[args.subcommand]:
            if getattr(args, reqs, None) is None:
                if help_dict[reqs].choices is not None:
                    res = choice_handler(reqs, pstatus, pspr)
                else:
                    res = input_handler(reqs, pstatus, pspr)
                setattr(args, reqs, res)
            else:
                pspr(f"{reqs}: {getattr(args, reqs)}")
        pspr("\nInput Complete! Executing...")
        run(args, pspr)
    except InvalidParameterError as exc:
        print(f"Invalid parameter: {exc}", file=sys.stderr)
        sys.exit(EXIT_INVALID_PARAMETER)
    except KeyConstructionError as exc:
        print(f"Key construction failed: {exc}", file=sys.stderr)
        sys.exit(EXIT_KEY_CONSTRUCTION)
    pspr("Thank you for using rsacore!")
    pspr("Goodbye!")


if __name__ == "__main__":
    main()
