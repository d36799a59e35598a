"""
Tracker constants shared by the payload builder, the tracker and the emitters.
"""

VERSION = "py-0.2.0"

DEFAULT_VENDOR = "com.snowplowanalytics"
DEFAULT_PLATFORM = "pc"

DEFAULT_SCHEME = "https"
DEFAULT_COLLECTOR_PATH = "/i"

SCREEN_VIEW_EVENT_NAME = "screen_view"

# Payload configuration keys
ENCODE_BASE64 = "encode_base64"

# Fields carried over from one tracking call to the next
STICKY_KEYS = ("uid", "res", "vp", "cd", "tz", "lang")

# Every key of the collector's wire schema; callers may not overwrite these via set_param
RESERVED_KEYS = frozenset({
    "e", "url", "page", "refr",
    "se_ca", "se_ac", "se_la", "se_pr", "se_va",
    "ue_na", "ue_pr", "ue_px", "co", "cx",
    "tid", "tr_id", "tr_tt", "tr_af", "tr_tx", "tr_sh", "tr_ci", "tr_st", "tr_co", "tr_cu",
    "ti_id", "ti_sk", "ti_nm", "ti_ca", "ti_pr", "ti_qu", "ti_cu",
    "evn", "p", "tv", "tna", "aid", "dtm",
    "uid", "res", "vp", "cd", "tz", "lang",
})
