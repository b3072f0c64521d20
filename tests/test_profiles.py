import pytest

from naj.errors import ProfileExists, ProfileNotFound
from naj.git import GitResult
from naj.profiles import ProfileStore


def test_resolve_returns_absolute_path(profile_dir):
    store = ProfileStore(profile_dir)
    path = store.resolve("work")
    assert path.is_absolute()
    assert path.name == "work.gitconfig"


def test_resolve_missing_profile(profile_dir):
    store = ProfileStore(profile_dir)
    with pytest.raises(ProfileNotFound) as excinfo:
        store.resolve("nobody")
    assert "nobody" in str(excinfo.value)


def test_create_writes_user_section(tmp_path):
    store = ProfileStore(tmp_path / "new-profiles")
    path = store.create("Test User", "test@example.com", "test_user")

    content = path.read_text()
    assert path == tmp_path / "new-profiles" / "test_user.gitconfig"
    assert "[user]" in content
    assert "name = Test User" in content
    assert "email = test@example.com" in content


def test_create_refuses_duplicates(profile_dir):
    store = ProfileStore(profile_dir)
    with pytest.raises(ProfileExists):
        store.create("Other", "o@x.com", "work")


def test_remove_and_remove_again(profile_dir):
    store = ProfileStore(profile_dir)
    store.remove("home")
    assert not (profile_dir / "home.gitconfig").exists()
    with pytest.raises(ProfileNotFound):
        store.remove("home")


def test_list_ids(profile_dir, tmp_path):
    (profile_dir / "notes.txt").write_text("ignored")
    assert ProfileStore(profile_dir).list_ids() == ["home", "work"]
    assert ProfileStore(tmp_path / "missing").list_ids() == []


def test_read_pairs_uses_git(profile_dir, fake_git):
    store = ProfileStore(profile_dir, fake_git)
    assert store.read_pairs("work") == [
        ("user.name", "Work User"),
        ("user.email", "work@x.com"),
    ]

    call = fake_git.calls[-1]
    assert call.args[:2] == ["config", "-f"]
    assert call.args[-2:] == ["--list", "-z"]
    assert call.mutating is False


def test_edit_runs_editor(profile_dir, monkeypatch):
    seen = {}

    class Proc:
        returncode = 0

    def fake_run(cmd, check=False):
        seen["cmd"] = cmd
        return Proc()

    monkeypatch.setattr("naj.profiles.subprocess.run", fake_run)
    ProfileStore(profile_dir).edit("work", editor="nano")
    assert seen["cmd"][0] == "nano"
    assert seen["cmd"][1].endswith("work.gitconfig")


def test_read_pairs_treats_bare_key_as_true(profile_dir, fake_git):
    (profile_dir / "signer.gitconfig").write_text(
        "[user]\n    name = Signer\n[commit]\n    gpgsign\n"
    )
    store = ProfileStore(profile_dir, fake_git)
    assert store.read_pairs("signer") == [
        ("user.name", "Signer"),
        ("commit.gpgsign", "true"),
    ]


def test_read_pairs_keeps_multiline_values(profile_dir):
    class Runner:
        def run(self, args, *, cwd, interactive=False, mutating=True):
            out = "alias.two\nfirst\nsecond\0user.name\nA=B\0core.bare\0"
            return GitResult(tuple(args), 0, stdout=out)

    store = ProfileStore(profile_dir, Runner())
    assert store.read_pairs("work") == [
        ("alias.two", "first\nsecond"),
        ("user.name", "A=B"),
        ("core.bare", "true"),
    ]
