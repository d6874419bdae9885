# pylint: disable=missing-module-docstring
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import pytest

import rsacore
from rsacore import __main__ as cli
from rsacore import rsa as rsau

pytestmark = pytest.mark.filterwarnings("ignore:Key size .* is insecure")


def parse_keygen(output: str) -> tuple[rsau.PublicKey, rsau.PrivateKey]:
    values = dict(line.split("=", 1) for line in output.splitlines() if "=" in line)
    n = int(values["n"])
    return rsau.PublicKey(int(values["e"]), n), rsau.PrivateKey(int(values["d"]), n)


@pytest.mark.parametrize("backend", ["native", "gmpy2"])
def test_keygen(capsys, backend):
    cli.main(["-n", "keygen", "--nlen", "256", "--seed", "11", "--attempts", "5", "--backend", backend])
    out = capsys.readouterr().out
    pub, priv = parse_keygen(out)
    assert pub.e == 65537
    assert priv.decrypt(pub.encrypt(65)) == 65
    assert "Welcome" not in out


def test_keygen_euler(capsys):
    cli.main(["-n", "keygen", "--nlen", "128", "--attempts", "5", "--totient", "euler"])
    pub, priv = parse_keygen(capsys.readouterr().out)
    assert priv.decrypt(pub.encrypt(12345)) == 12345


def test_encrypt_decrypt(capsys):
    cli.main(["-n", "encrypt", "--e", "17", "--n", "3233", "--message", "65"])
    assert capsys.readouterr().out == "2790\n"
    cli.main(["-n", "decrypt", "--d", "413", "--n", "3233", "--message", "2790"])
    assert capsys.readouterr().out == "65\n"


def test_encrypt_default_exponent(capsys):
    cli.main(["-n", "encrypt", "--n", "3233", "--message", "65"])
    assert capsys.readouterr().out == f"{pow(65, 65537, 3233)}\n"


def test_text_roundtrip(capsys):
    pub, priv = rsacore.generate_keypair(512, attempts=5)
    cli.main(["-n", "encrypt", "--e", str(pub.e), "--n", str(pub.n), "--message", "Hi there!", "--text"])
    ciph = capsys.readouterr().out.strip()
    cli.main(["-n", "decrypt", "--d", str(priv.d), "--n", str(priv.n), "--message", ciph, "--text"])
    assert capsys.readouterr().out == "Hi there!\n"


@pytest.mark.parametrize("argv", [
    ["-n", "encrypt", "--e", "17", "--n", "3233", "--message", "3233"],
    ["-n", "encrypt", "--e", "17", "--n", "3233", "--message", "-5"],
    ["-n", "decrypt", "--d", "413", "--n", "3233", "--message", "5000"],
    ["-n", "encrypt", "--e", "17", "--n", "3233", "--message", "sixty-five"],
    ["-n", "keygen", "--nlen", "3"],
    ["-n", "keygen", "--nlen", "64", "--attempts", "0"],
    ["-n", "decrypt", "--n", "3233", "--message", "2790"],
    ["-n"],
])
def test_invalid_parameters(capsys, argv):
    with pytest.raises(SystemExit) as exc:
        cli.main(argv)
    assert exc.value.code == cli.EXIT_INVALID_PARAMETER
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.startswith("Invalid parameter:")


def test_key_construction_failure(mocker, capsys):
    mocker.patch("rsacore.primes.sample_prime", side_effect=[181, 181])
    with pytest.raises(SystemExit) as exc:
        cli.main(["-n", "keygen", "--nlen", "16"])
    assert exc.value.code == cli.EXIT_KEY_CONSTRUCTION
    captured = capsys.readouterr()
    assert "e=" not in captured.out
    assert captured.err.startswith("Key construction failed:")


def test_interactive_prompts(mocker, capsys):
    answers = iter(["", "3233", "65"])
    mocker.patch("builtins.input", side_effect=lambda _: next(answers))
    cli.main(["encrypt", "--e", "17"])
    out = capsys.readouterr().out
    assert "Welcome to rsacore!" in out
    assert "Please specify the n!" in out
    assert "Please specify the message!" in out
    assert "Please specify the backend!" not in out
    assert out.splitlines()[-3] == "2790"


def test_interactive_retries_conversion(mocker, capsys):
    answers = iter(["decrypt", "four-one-three", "413", "3233", "2790", "", ""])
    mocker.patch("builtins.input", side_effect=lambda _: next(answers))
    cli.main(["--advanced"])
    out = capsys.readouterr().out
    assert "We could not convert your value to int." in out
    assert "Please specify the text!" in out
    assert "Please specify the backend!" in out
    assert "Cleartext:\n65\n" in out


def test_interactive_subcommand_choice(mocker, capsys):
    answers = iter(["encrypt", "17", "3233", "65"])
    mocker.patch("builtins.input", side_effect=lambda _: next(answers))
    cli.main([])
    out = capsys.readouterr().out
    assert "Please specify the text!" not in out
    assert "Ciphertext:\n2790\n" in out


def test_interactive_text_roundtrip(mocker, capsys):
    answers = iter(["encrypt", "17", "3233", "A", "yes", "", "decrypt", "413", "3233", "2790", "yes", ""])
    mocker.patch("builtins.input", side_effect=lambda _: next(answers))
    cli.main(["--advanced"])
    assert "Ciphertext:\n2790\n" in capsys.readouterr().out
    cli.main(["--advanced"])
    assert "Cleartext:\nA\n" in capsys.readouterr().out


def test_decrypt_text_not_utf8(capsys):
    # 255 decodes to the lone byte 0xff, which no UTF-8 sequence starts with.
    with pytest.raises(SystemExit) as exc:
        cli.main(["-n", "decrypt", "--d", "413", "--n", "3233", "--message", str(pow(255, 17, 3233)), "--text"])
    assert exc.value.code == cli.EXIT_INVALID_PARAMETER
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.startswith("Invalid parameter: Cleartext is not valid UTF-8")


def test_version(capsys):
    with pytest.raises(SystemExit) as exc:
        cli.main(["--version"])
    assert exc.value.code == 0
    assert capsys.readouterr().out.strip() == f"rsacore {rsacore.__version__}"
