import stat

from mac_setup import ssh

PUBLIC_KEY = "ssh-ed25519 AAAAC3NzaC1lZDI1NTE5AAAAIFake test@example.com"
AGENT_OUTPUT = (
    "SSH_AUTH_SOCK=/tmp/ssh-abc/agent.42; export SSH_AUTH_SOCK;\n"
    "SSH_AGENT_PID=43; export SSH_AGENT_PID;\n"
    "echo Agent pid 43;\n"
)


def fake_keygen(argv):
    path = argv[argv.index("-f") + 1]
    with open(path, "w") as f:
        f.write("private\n")
    with open(path + ".pub", "w") as f:
        f.write(PUBLIC_KEY + "\n")
    return 0, ""


def test_parse_agent_output():
    assert ssh.parse_agent_output(AGENT_OUTPUT) == {
        "SSH_AUTH_SOCK": "/tmp/ssh-abc/agent.42",
        "SSH_AGENT_PID": "43",
    }
    assert ssh.parse_agent_output("") == {}


def test_declined_runs_nothing(ctx, runner, config):
    assert ssh.generate_ssh_key(ctx, generate=False) is ctx
    assert runner.commands == []
    assert not config.ssh_dir.exists()


def test_existing_key_is_kept(ctx, runner, config):
    config.ssh_dir.mkdir()
    config.ssh_key_path.write_text("private\n")
    config.ssh_key_path.with_suffix(".pub").write_text(PUBLIC_KEY + "\n")

    ssh.generate_ssh_key(ctx, generate=True, show_existing=True)

    assert not runner.ran("ssh-keygen")
    pbcopy = runner.calls_with("pbcopy")[0]
    assert pbcopy.input_text == PUBLIC_KEY


def test_existing_key_not_shown_unless_asked(ctx, runner, config):
    config.ssh_dir.mkdir()
    config.ssh_key_path.write_text("private\n")

    ssh.generate_ssh_key(ctx, generate=True)

    assert runner.commands == []


def test_new_key_is_generated_and_registered(ctx, runner, config):
    runner.responses[("ssh-keygen",)] = fake_keygen
    runner.respond("ssh-agent", "-s", stdout=AGENT_OUTPUT)

    new_ctx = ssh.generate_ssh_key(ctx, generate=True)

    keygen = runner.calls_with("ssh-keygen")[0].argv
    assert keygen == [
        "ssh-keygen", "-t", "ed25519", "-C", "test@example.com",
        "-f", str(config.ssh_key_path), "-N", "",
    ]
    assert stat.S_IMODE(config.ssh_dir.stat().st_mode) == 0o700

    assert new_ctx.env.variables["SSH_AUTH_SOCK"] == "/tmp/ssh-abc/agent.42"
    add = runner.calls_with("ssh-add")[0]
    assert add.argv == ["ssh-add", str(config.ssh_key_path)]
    assert add.env.variables["SSH_AGENT_PID"] == "43"

    ssh_config = config.ssh_config_path.read_text()
    assert "UseKeychain yes" in ssh_config
    assert "IdentityFile ~/.ssh/id_ed25519" in ssh_config
    assert stat.S_IMODE(config.ssh_config_path.stat().st_mode) == 0o600

    assert runner.calls_with("pbcopy")[0].input_text == PUBLIC_KEY


def test_running_agent_is_reused(ctx, runner, monkeypatch):
    monkeypatch.setenv("SSH_AUTH_SOCK", "/tmp/existing.sock")
    runner.responses[("ssh-keygen",)] = fake_keygen

    ssh.generate_ssh_key(ctx, generate=True)

    assert not runner.ran("ssh-agent")
    assert runner.ran("ssh-add")


def test_client_config_not_duplicated(ctx, runner, config):
    config.ssh_dir.mkdir()
    config.ssh_config_path.write_text("Host *\n  IdentityFile ~/.ssh/id_ed25519\n")
    runner.responses[("ssh-keygen",)] = fake_keygen

    ssh.generate_ssh_key(ctx, generate=True)

    assert config.ssh_config_path.read_text().count("id_ed25519") == 1


def test_keygen_failure_stops(ctx, runner, config):
    runner.respond("ssh-keygen", rc=1)

    ssh.generate_ssh_key(ctx, generate=True)

    assert not runner.ran("ssh-add")
    assert not runner.ran("pbcopy")
    assert not config.ssh_config_path.exists()
