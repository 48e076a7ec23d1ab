"""
NVRA parser module for decomposing RPM package identifiers

Package identifiers come in the form name-version-release.arch, e.g.:
- foo-1.0-1.i386 returns foo, 1.0, 1, i386
- bar-9-123a.ia64 returns bar, 9, 123a, ia64

Names may contain hyphens themselves, so the string is scanned right to left:
the last dot separates the architecture, then the last two hyphens separate
release and version, and whatever remains is the name.
"""

from typing import NamedTuple

from .errors import SatelliteAdapterError


class MalformedIdentifier(SatelliteAdapterError, ValueError):
    """Raised when a package identifier carries no architecture suffix"""
    pass


class PackageIdentifier(NamedTuple):
    """Components of an NVRA package identifier"""
    name: str
    version: str
    release: str
    arch: str


def _split_last(value: str, separator: str):
    # no separator: the extracted segment is empty and the remainder is untouched
    index = value.rfind(separator)
    if index == -1:
        return value, ""
    return value[:index], value[index + 1:]


def parse_nvra(nvra: str) -> PackageIdentifier:
    """
    Parse an NVRA string into name, version, release and architecture

    Args:
        nvra: Package identifier such as 'bash-5.1.8-6.el9.x86_64'

    Returns:
        PackageIdentifier with the four positional components

    Raises:
        MalformedIdentifier: If the string contains no '.'
    """
    # tuned-profiles-cpu-partitioning-2.18.0-1.2.20220511git9fa66f19.el8fdp.noarch
    #                                                                      ^----->|
    if "." not in nvra:
        raise MalformedIdentifier(f"invalid format: no arch info in {nvra!r}")
    remainder, arch = _split_last(nvra, ".")

    # tuned-profiles-cpu-partitioning-2.18.0-1.2.20220511git9fa66f19.el8fdp.noarch
    #                                       ^----------------------------->|
    remainder, release = _split_last(remainder, "-")

    # tuned-profiles-cpu-partitioning-2.18.0-1.2.20220511git9fa66f19.el8fdp.noarch
    #                                ^----->|
    name, version = _split_last(remainder, "-")

    return PackageIdentifier(name=name, version=version, release=release, arch=arch)
