from __future__ import annotations

from enum import Enum


class Platform(str, Enum):
    IOS = "ios"
    ANDROID = "android"
    HUAWEI = "huawei"
