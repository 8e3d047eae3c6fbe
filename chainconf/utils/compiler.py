import platform
import sys

from .common import fetch
from .constants import SOLC_LIST_URL
from .logger import logger
from .custom_exceptions import CompilerError


def get_solc_native_platform_from_os():
    platform_name = sys.platform
    if platform_name == "linux":
        return "linux-amd64"
    elif platform_name == "darwin":
        return "macosx-amd64" if platform.machine() == "x86_64" else "macosx-arm64"
    elif platform_name == "win32":
        return "windows-amd64"
    else:
        raise CompilerError(f"Unsupported platform {platform_name}")


def _matches_version(build: dict, required_version: str) -> bool:
    if "+" in required_version:
        return build["longVersion"] == required_version
    return build["version"] == required_version and "prerelease" not in build


def get_compiler_build(required_version: str, required_platform: str | None = None):
    """
    Look up the solc release in the public solc-bin build list. Nothing is downloaded.

    Args:
        required_version: "0.8.17" or a long version like "0.8.17+commit.8df45f5f"
        required_platform: solc-bin platform directory, defaults to the native one

    Returns:
        The build record from list.json

    Raises:
        CompilerError: If the build list has no such release
    """
    required_platform = required_platform or get_solc_native_platform_from_os()
    compilers_list_url = SOLC_LIST_URL.format(platform=required_platform)
    try:
        available_compilers_list = fetch(compilers_list_url).json()
    except ValueError as json_err:
        raise CompilerError(f"Build list is not JSON: {json_err}")

    required_build_info = next(
        (
            build
            for build in available_compilers_list.get("builds", [])
            if _matches_version(build, required_version)
        ),
        None,
    )

    if not required_build_info:
        raise CompilerError(
            f'Required compiler version "{required_version}" for "{required_platform}" is not found'
        )

    logger.okay("Compiler build", required_build_info["longVersion"])
    return required_build_info
