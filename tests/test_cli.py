import json

import pytest
import requests

from chainconf.chainconf import __version__, check_config, main, networks_report
from chainconf.utils.custom_exceptions import CredentialsError, ExceptionHandler
from chainconf.utils.toolchain import load_toolchain_config


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    # load_dotenv writes straight into os.environ, so register both names for undo
    for name in ("DEPLOYER_PRIVATE_KEY", "ETHERSCAN_API_KEY"):
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return tmp_path


def test_version(capsys):
    main(["--version"])
    assert capsys.readouterr().out.strip() == f"chainconf {__version__}"


def test_show_defaults(workdir, capsys):
    main(["show"])

    output = capsys.readouterr().out
    assert "0.8.17" in output
    assert "mumbai" in output
    assert "Explorer API key isn't set" in output


def test_show_masks_secrets(workdir, monkeypatch, capsys):
    monkeypatch.setenv("DEPLOYER_PRIVATE_KEY", "0x" + "ab" * 32)
    monkeypatch.setenv("ETHERSCAN_API_KEY", "ETHERSCANKEY123")

    main([])

    output = capsys.readouterr().out
    assert "ETHERSCANKEY123" not in output
    assert "ab" * 32 not in output


def test_env_file_is_loaded(workdir):
    (workdir / ".env").write_text(
        "DEPLOYER_PRIVATE_KEY=0xfromdotenvfile\nETHERSCAN_API_KEY=dotenvkey\n"
    )

    main(["export", "--reveal-secrets", "-o", "out.json"])

    exported = json.loads((workdir / "out.json").read_text())
    assert exported["networks"]["mumbai"]["accounts"] == ["0xfromdotenvfile"]
    assert exported["etherscan"]["apiKey"] == "dotenvkey"


def test_process_env_wins_over_env_file(workdir, monkeypatch):
    (workdir / ".env").write_text("ETHERSCAN_API_KEY=dotenvkey\n")
    monkeypatch.setenv("ETHERSCAN_API_KEY", "processkey")

    main(["export", "--reveal-secrets", "-o", "out.json"])

    exported = json.loads((workdir / "out.json").read_text())
    assert exported["etherscan"]["apiKey"] == "processkey"


def test_export_masked_by_default(workdir, monkeypatch):
    monkeypatch.setenv("ETHERSCAN_API_KEY", "ETHERSCANKEY123")

    main(["export", "-o", "exports/toolchain.json"])

    exported = json.loads((workdir / "exports" / "toolchain.json").read_text())
    assert exported["etherscan"]["apiKey"] == "ETH*********123"
    assert exported["networks"]["mumbai"]["accounts"] == [None]


def test_default_config_file_is_picked_up(workdir):
    (workdir / "chainconf.yaml").write_text(
        'solidity:\n  version: "0.8.20"\n  optimizer:\n    runs: 999\n'
    )

    main(["export", "-o", "out.json"])

    exported = json.loads((workdir / "out.json").read_text())
    assert exported["solidity"]["version"] == "0.8.20"
    assert exported["solidity"]["settings"]["optimizer"]["runs"] == 999


def test_bad_config_exits(workdir):
    (workdir / "broken.yaml").write_text("solidity:\n  version: latest\n")

    with pytest.raises(SystemExit) as exit_info:
        main(["--config", "broken.yaml", "show"])
    assert exit_info.value.code == 1


def test_missing_config_file_exits(workdir):
    with pytest.raises(SystemExit):
        main(["--config", "nope.yaml"])


def test_strict_exits_without_keys(workdir):
    with pytest.raises(SystemExit) as exit_info:
        main(["--strict", "show"])
    assert exit_info.value.code == 1


def test_check_fails_without_keys(workdir, capsys):
    with pytest.raises(SystemExit) as exit_info:
        main(["check", "--network", "mumbai"])

    assert exit_info.value.code == 1
    assert "DEPLOYER_PRIVATE_KEY is not set" in capsys.readouterr().out


def test_check_passes_with_keys(workdir, monkeypatch, capsys):
    monkeypatch.setenv("DEPLOYER_PRIVATE_KEY", "0x" + "ab" * 32)

    main(["check"])

    assert "Done in" in capsys.readouterr().out


def test_check_ping(workdir, monkeypatch, fake_response, capsys):
    monkeypatch.setenv("DEPLOYER_PRIVATE_KEY", "0x" + "ab" * 32)
    urls = []

    def fake_post(url, data=None, headers=None, timeout=None):
        urls.append(url)
        return fake_response({"result": "0x13881"})

    monkeypatch.setattr(requests, "post", fake_post)

    main(["check", "--ping"])

    assert urls == ["https://matic-mumbai.chainstacklabs.com"]
    assert "Chain ID was successfully received" in capsys.readouterr().out


def test_check_ping_keep_going_on_bad_chain_id(workdir, monkeypatch, fake_response):
    monkeypatch.setenv("DEPLOYER_PRIVATE_KEY", "0x" + "ab" * 32)
    monkeypatch.setattr(
        requests, "post", lambda *args, **kwargs: fake_response({"result": None})
    )

    with pytest.raises(SystemExit) as exit_info:
        main(["check", "--ping", "--keep-going"])
    assert exit_info.value.code == 1


def test_unhashable_yaml_key_exits(workdir):
    (workdir / "broken.yaml").write_text(
        "networks:\n  ? [a, b]\n  : {url: https://x}\n"
    )

    with pytest.raises(SystemExit) as exit_info:
        main(["--config", "broken.yaml", "show"])
    assert exit_info.value.code == 1


def test_check_keep_going_counts_failures():
    config = load_toolchain_config(environ={})
    ExceptionHandler.initialize(False)

    assert check_config(config, "mumbai") == 1
    assert check_config(config, "goerli") == 1


def test_check_raises_by_default():
    config = load_toolchain_config(environ={})
    ExceptionHandler.initialize(True)

    with pytest.raises(CredentialsError):
        check_config(config, "mumbai")


def test_networks_report(full_env):
    report = networks_report(load_toolchain_config(environ=full_env))
    assert report == [
        [1, "hardhat", "-", 0, "n/a"],
        [2, "mumbai", "https://matic-mumbai.chainstacklabs.com", 1, "set"],
    ]

    report = networks_report(load_toolchain_config(environ={}))
    assert report[1][4] == "missing"
