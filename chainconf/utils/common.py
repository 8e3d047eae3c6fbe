import json
import os
from collections.abc import Hashable

import requests
import yaml

from .logger import logger
from .custom_types import Config
from .custom_exceptions import ConfigError, NodeError, CompilerError
from .constants import REQUEST_TIMEOUT_SEC


class _UniqueKeyLoader(yaml.SafeLoader):
    def construct_mapping(self, node, deep=False):
        seen = set()
        for key_node, _ in node.value:
            # keys pulled in by `<<` may be overridden, only explicit keys must be unique
            if key_node.tag == "tag:yaml.org,2002:merge":
                continue
            key = self.construct_object(key_node, deep=deep)
            if not isinstance(key, Hashable):
                raise ConfigError(
                    f"unhashable key {key!r} (line {key_node.start_mark.line + 1})"
                )
            if key in seen:
                raise ConfigError(
                    f'duplicate key "{key}" (line {key_node.start_mark.line + 1})'
                )
            seen.add(key)
        return super().construct_mapping(node, deep=deep)


def _reject_duplicate_keys(pairs):
    result = {}
    for key, value in pairs:
        if key in result:
            raise ConfigError(f'duplicate key "{key}"')
        result[key] = value
    return result


def load_config(path: str) -> Config:
    """
    Load an override file. The format is picked by extension: .json, .yaml or .yml.

    Raises:
        ValueError: If the extension is unsupported or the file is empty
        ConfigError: If a mapping repeats a key
    """
    extension = os.path.splitext(path)[1].lower()
    with open(path, mode="r") as config_file:
        if extension == ".json":
            config = json.load(config_file, object_pairs_hook=_reject_duplicate_keys)
        elif extension in (".yaml", ".yml"):
            config = yaml.load(config_file, Loader=_UniqueKeyLoader)
        else:
            raise ValueError(
                f'Unsupported config file extension "{extension}" for {path}'
            )

    if config is None:
        raise ValueError(f"Config {path} is empty or contains only comments")
    if not isinstance(config, dict):
        raise ConfigError(f"top level of {path} must be a mapping")
    return config


def _handle_request_errors(error_class):
    """Decorator to handle common HTTP request errors and convert them to custom exceptions."""

    def decorator(func):
        def wrapper(*args, **kwargs):
            try:
                response = func(*args, **kwargs)
                response.raise_for_status()
                return response
            except requests.exceptions.HTTPError as http_err:
                raise error_class(f"HTTP error occurred: {http_err}")
            except requests.exceptions.ConnectionError as conn_err:
                raise error_class(f"Connection error occurred: {conn_err}")
            except requests.exceptions.Timeout as timeout_err:
                raise error_class(f"Timeout error occurred: {timeout_err}")
            except requests.exceptions.RequestException as req_err:
                raise error_class(f"Request exception occurred: {req_err}")

        return wrapper

    return decorator


@_handle_request_errors(CompilerError)
def fetch(url, headers=None):
    logger.log(f"Fetch: {url}")
    return requests.get(url, headers=headers, timeout=REQUEST_TIMEOUT_SEC)


@_handle_request_errors(NodeError)
def pull(url, payload=None, headers=None):
    logger.log(f"Pull: {mask_text(url)}")
    return requests.post(url, data=payload, headers=headers, timeout=REQUEST_TIMEOUT_SEC)


def mask_text(text, mask_start=3, mask_end=3):
    text_length = len(text)
    if text_length <= mask_start + mask_end:
        return "*" * text_length
    mask = "*" * (text_length - mask_start - mask_end)
    return text[:mask_start] + mask + text[text_length - mask_end :]
