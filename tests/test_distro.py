import pytest

from xeol.distro import Distro, DistroType, Release, Version, type_from_release


@pytest.mark.parametrize(
    "release, expected_type, raw, version",
    [
        (Release(id="centos", version_id="8", version="7"), DistroType.CENTOS, "8", "8.0.0"),
        (Release(name="windows", version_id="8"), DistroType.WINDOWS, "8", "8.0.0"),
        (Release(id="centos", version="8"), DistroType.CENTOS, "8", "8.0.0"),
        (Release(id="centos"), DistroType.CENTOS, "", None),
    ],
)
def test_from_release(release, expected_type, raw, version):
    d = Distro.from_release(release)
    assert d.type == expected_type
    assert d.full_version() == raw
    if version is None:
        assert d.version is None
    else:
        assert str(d.version) == version


def test_bogus_type_raises():
    with pytest.raises(ValueError):
        Distro.from_release(Release(id="bogosity", version_id="8"))


def test_id_like_fallback():
    assert type_from_release(Release(id="unknown", id_like=("debian",))) == DistroType.DEBIAN


@pytest.mark.parametrize("version", ["8", "18.04", "0", "18.1.2"])
def test_full_version(version):
    assert Distro.from_release(Release(id="centos", version=version)).full_version() == version


@pytest.mark.parametrize("version, expected", [("8", "8"), ("18.04", "18"), ("0", "0"), ("18.1.2", "18")])
def test_major_version(version, expected):
    assert Distro.from_release(Release(id="centos", version=version)).major_version() == expected


def test_version_parse():
    assert str(Version.parse("20.04")) == "20.4.0"
    assert Version.parse("3.11.6").segments() == [3, 11, 6]
    with pytest.raises(ValueError):
        Version.parse("not-a-version")


def test_rolling_and_str():
    assert Distro.create(DistroType.WOLFI, "").is_rolling()
    assert not Distro.create(DistroType.DEBIAN, "8").is_rolling()
    assert str(Distro.create(DistroType.DEBIAN, "")) == "debian (version unknown)"
    assert Distro.create(DistroType.DEBIAN, "8").name() == "debian"