"""Fixed paths and defaults used by the build steps."""

SCRIPT_NAME = "domainbuild"

DEFAULT_LOG_DIR = "/root"
LOG_FILE_PATTERN = "build_log_{timestamp}.log"
LOG_TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"
LOG_RECORD_DATEFMT = "%Y-%m-%d %H:%M:%S"

DEFAULT_CONFIG_FILE = ".domainbuild.yml"

DEFAULT_EMERGENCY_ACCOUNT = "OZBACKUP"
DEFAULT_ADMIN_GROUP = "sudo"
DEFAULT_DOMAIN_PACKAGES = (
    "libnss-sss",
    "libpam-sss",
    "sssd",
    "sssd-tools",
    "adcli",
    "samba-common-bin",
    "realmd",
)
DEFAULT_EXTRA_PACKAGES = ("curl", "wget", "vim", "nano", "htop")
DEFAULT_ENABLE_SERVICES = ("acc",)
DEFAULT_SLEEP_TARGETS = (
    "sleep.target",
    "suspend.target",
    "hibernate.target",
    "hybrid-sleep.target",
)
DEFAULT_REBOOT_DELAY_SECONDS = 10
DEFAULT_LOG_VIEWERS = ("gedit", "gnome-text-editor")

SUDOERS_DIR = "/etc/sudoers.d"
SUDOERS_MODE = "0440"
HOSTS_FILE = "/etc/hosts"
PAM_MKHOMEDIR_PROFILE = "/usr/share/pam-configs/mkhomedir"
PAM_MKHOMEDIR_CONTENT = """Name: activate mkhomedir
Default: yes
Priority: 900
Session-Type: Additional
Session:
        required pam_mkhomedir.so umask=0022 skel=/etc/skel
"""

APT_ENV = {"DEBIAN_FRONTEND": "noninteractive"}
