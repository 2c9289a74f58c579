"""Names and enums shared by all MIoT device kinds."""

from enum import Enum


class PropertyFormat(str, Enum):
    """Value format of a MIoT property."""

    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    STRING = "string"


class Access(str, Enum):
    READ = "read"
    WRITE = "write"
    NOTIFY = "notify"


READ_WRITE_NOTIFY = frozenset({Access.READ, Access.WRITE, Access.NOTIFY})
READ_NOTIFY = frozenset({Access.READ, Access.NOTIFY})
WRITE_ONLY = frozenset({Access.WRITE})


class DeviceType(str, Enum):
    UNKNOWN = "unknown"
    FAN = "fan"
    LIGHT = "light"


class TimerUnit(str, Enum):
    SECONDS = "seconds"
    MINUTES = "minutes"
    HOURS = "hours"


class Properties:
    """Property names common to every device kind."""

    POWER = "power"
    CHILD_LOCK = "child_lock"
    POWER_OFF_TIME = "power_off_time"
    ALARM = "alarm"
    LIGHT = "light"
    TEMPERATURE = "temperature"
    RELATIVE_HUMIDITY = "relative_humidity"
    BATTERY_POWER = "battery_power"
    BATTERY_LEVEL = "battery_level"
    AC_POWER = "ac_power"
    USE_TIME = "use_time"


class Capabilities:
    """Capability names common to every device kind."""

    POWER_OFF_TIMER_UNIT = "power_off_timer_unit"
    POWER_OFF_TIMER_RANGE = "power_off_timer_range"
    LED_BRIGHTNESS_CONTROL = "led_brightness_control"
    BUILT_IN_BATTERY = "built_in_battery"


class Methods:
    GET_PROPERTIES = "get_properties"
    SET_PROPERTIES = "set_properties"


# per-item result code signalling success
SUCCESS_CODE = 0
