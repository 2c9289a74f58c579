"""Device kinds of the supported models.

Property addresses follow the MIoT spec instances published at
http://miot-spec.org/miot-spec-v2/instances?status=all
"""

from miotbridge.devices.base import BASE_POWER, GENERIC, DeviceKind
from miotbridge.devices.constants import (
    Capabilities,
    PropertyFormat,
    Properties,
    READ_NOTIFY,
    READ_WRITE_NOTIFY,
    TimerUnit,
    WRITE_ONLY,
)
from miotbridge.devices.fan import FanCapabilities, FanProperties, fan_kind
from miotbridge.devices.light import LightCapabilities, LightProperties, light_kind
from miotbridge.devices.properties import PropertySpec

BOOL = PropertyFormat.BOOL
INT = PropertyFormat.INT
FLOAT = PropertyFormat.FLOAT
STRING = PropertyFormat.STRING


DMAKER_FAN_P9 = fan_kind(
    [
        BASE_POWER,
        PropertySpec(FanProperties.FAN_LEVEL, 2, 2, INT),
        PropertySpec(FanProperties.MODE, 2, 4, INT),
        PropertySpec(FanProperties.HORIZONTAL_SWING, 2, 5, BOOL),
        PropertySpec(FanProperties.HORIZONTAL_SWING_ANGLE, 2, 6, INT),
        PropertySpec(Properties.ALARM, 2, 7, BOOL),
        PropertySpec(Properties.POWER_OFF_TIME, 2, 8, INT),
        PropertySpec(Properties.LIGHT, 2, 9, BOOL),
        PropertySpec(FanProperties.HORIZONTAL_MOVE, 2, 10, STRING, WRITE_ONLY),
        PropertySpec(FanProperties.FAN_SPEED, 2, 11, INT),
        PropertySpec(Properties.CHILD_LOCK, 3, 1, BOOL),
    ],
    {
        FanCapabilities.FAN_LEVELS: 4,
        FanCapabilities.FAN_SPEED_RANGE: (1, 100),
        FanCapabilities.HORIZONTAL_SWING_LEVELS: (30, 60, 90, 120, 150),
        FanCapabilities.NORMAL_MODE: 0,
        FanCapabilities.NATURAL_MODE: 1,
        Capabilities.POWER_OFF_TIMER_UNIT: TimerUnit.MINUTES,
        Capabilities.POWER_OFF_TIMER_RANGE: (0, 480),
    },
)

ZHIMI_FAN_ZA4 = fan_kind(
    [
        BASE_POWER,
        PropertySpec(FanProperties.FAN_LEVEL, 2, 2, INT),
        PropertySpec(FanProperties.HORIZONTAL_SWING, 2, 3, BOOL),
        PropertySpec(FanProperties.HORIZONTAL_SWING_ANGLE, 2, 5, INT),
        PropertySpec(FanProperties.MODE, 2, 7, INT),
        PropertySpec(Properties.POWER_OFF_TIME, 3, 1, INT),
        PropertySpec(Properties.ALARM, 4, 1, BOOL),
        PropertySpec(Properties.LIGHT, 5, 1, BOOL),
        PropertySpec(Properties.CHILD_LOCK, 6, 1, BOOL),
        PropertySpec(FanProperties.FAN_SPEED, 7, 1, INT),
        PropertySpec(Properties.USE_TIME, 7, 2, INT, READ_NOTIFY),
        PropertySpec(Properties.TEMPERATURE, 8, 1, FLOAT, READ_NOTIFY),
        PropertySpec(Properties.RELATIVE_HUMIDITY, 8, 2, INT, READ_NOTIFY),
        PropertySpec(Properties.BATTERY_LEVEL, 9, 1, INT, READ_NOTIFY),
        PropertySpec(Properties.BATTERY_POWER, 9, 2, BOOL, READ_NOTIFY),
        PropertySpec(Properties.AC_POWER, 9, 3, BOOL, READ_NOTIFY),
    ],
    {
        FanCapabilities.FAN_LEVELS: 4,
        FanCapabilities.FAN_SPEED_RANGE: (1, 100),
        FanCapabilities.HORIZONTAL_SWING_ANGLE_RANGE: (30, 120),
        FanCapabilities.NORMAL_MODE: 0,
        FanCapabilities.NATURAL_MODE: 1,
        Capabilities.POWER_OFF_TIMER_UNIT: TimerUnit.SECONDS,
        Capabilities.POWER_OFF_TIMER_RANGE: (0, 28800),
        Capabilities.BUILT_IN_BATTERY: True,
    },
)

DMAKER_FAN_1C = fan_kind(
    [
        BASE_POWER,
        PropertySpec(FanProperties.FAN_LEVEL, 2, 2, INT),
        PropertySpec(FanProperties.HORIZONTAL_SWING, 2, 3, BOOL),
        PropertySpec(FanProperties.MODE, 2, 7, INT),
        PropertySpec(Properties.POWER_OFF_TIME, 2, 10, INT),
        PropertySpec(Properties.ALARM, 2, 11, BOOL),
        PropertySpec(Properties.LIGHT, 2, 12, BOOL),
        PropertySpec(Properties.CHILD_LOCK, 3, 1, BOOL),
    ],
    {
        FanCapabilities.FAN_LEVELS: 3,
        FanCapabilities.NORMAL_MODE: 0,
        FanCapabilities.SLEEP_MODE: 1,
        Capabilities.POWER_OFF_TIMER_UNIT: TimerUnit.HOURS,
        Capabilities.POWER_OFF_TIMER_RANGE: (0, 8),
    },
)

YEELINK_LIGHT_CEILING22 = light_kind(
    [
        BASE_POWER,
        PropertySpec(LightProperties.BRIGHTNESS, 2, 2, INT),
        PropertySpec(LightProperties.COLOR_TEMPERATURE, 2, 3, INT),
        PropertySpec(LightProperties.NIGHT_LIGHT, 4, 1, BOOL, READ_WRITE_NOTIFY),
        PropertySpec(Properties.POWER_OFF_TIME, 4, 2, INT),
    ],
    {
        LightCapabilities.BRIGHTNESS_RANGE: (1, 100),
        LightCapabilities.COLOR_TEMPERATURE_RANGE: (2700, 6500),
        Capabilities.POWER_OFF_TIMER_UNIT: TimerUnit.MINUTES,
        Capabilities.POWER_OFF_TIMER_RANGE: (0, 180),
    },
)

KINDS: dict[str, DeviceKind] = {
    "dmaker.fan.p9": DMAKER_FAN_P9,
    "zhimi.fan.za4": ZHIMI_FAN_ZA4,
    "dmaker.fan.1c": DMAKER_FAN_1C,
    "yeelink.light.ceiling22": YEELINK_LIGHT_CEILING22,
}


def kind_for_model(model: str) -> DeviceKind:
    """Return the kind registered for ``model``, or the generic power-only kind."""
    return KINDS.get(model, GENERIC)
