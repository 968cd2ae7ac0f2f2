# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "DEVDESK_APP_NAME": "App display name (default: devdesk).",
    "DEVDESK_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    # Paths
    "DEVDESK_DATA_DIR": "Local data directory (default: .local/devdesk).",
    "DEVDESK_STORE_PATH": "SQLite snapshot file (default: <data_dir>/devdesk.sqlite3).",
    # Due-date monitor
    "DEVDESK_DUE_CHECK_INTERVAL_SECONDS": "How often due dates are scanned (default: 60).",
    "DEVDESK_DUE_SOON_MINUTES": "Window for the one-shot 'due soon' alert (default: 15).",
    "DEVDESK_DUE_HIGHLIGHT_MINUTES": "Window for the 'Due Soon' marker in /list and /show (default: 30).",
    # Timer
    "DEVDESK_TIMER_TICK_MS": "Countdown refresh cadence in milliseconds (default: 100).",
    "DEVDESK_POMODORO_MINUTES": "Pomodoro preset (default: 25).",
    "DEVDESK_DEEP_WORK_MINUTES": "Deep Work preset (default: 90).",
    "DEVDESK_POMODORO_SESSIONS": "Pomodoro sessions per cycle (default: 4).",
    # Alerts
    "DEVDESK_ALARM_ENABLED": "Play the alarm tone on completion (true/false). Needs PortAudio.",
    "DEVDESK_DESKTOP_NOTIFICATIONS": "Show the completion banner + bell in a TTY (true/false).",
}
