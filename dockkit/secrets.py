"""Patterns that flag file names and file contents likely to hold secrets."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from typing import Iterable, Optional


class SecretType(str, Enum):
    """What a pattern is meant to be matched against."""

    FILENAME = "Filename"
    FILE_CONTENT = "FileContent"


# One piece of a regular expression: an escape, a whole character class, or a
# single character.
_REGEX_PIECE = re.compile(r"\\.|\[\^?\]?(?:\\.|[^\]\\])*\]|.", re.DOTALL)


def _translate(expression: str) -> str:
    """Rewrite RE2-style anchors into their Python equivalents.

    ``\\z`` and a bare ``$`` both mean end of text, and ``\\A*`` (a repeated
    anchor) always matches the empty string.
    """
    out: list[str] = []
    for piece in _REGEX_PIECE.findall(expression):
        if piece == "*" and out and out[-1] == r"\A":
            out.pop()
            continue
        if piece in (r"\z", "$"):
            out.append(r"\Z")
        else:
            out.append(piece)
    return "".join(out)


@dataclass(frozen=True)
class Pattern:
    """A named regular expression describing one kind of secret."""

    description: str
    secret_type: SecretType
    value: str
    regex: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "secret_type", SecretType(self.secret_type))
        object.__setattr__(self, "regex", re.compile(_translate(self.value), re.ASCII))

    def matches(self, text: str) -> bool:
        """Return True if the pattern occurs anywhere in ``text``."""
        return self.regex.search(text) is not None


_F = SecretType.FILENAME
_C = SecretType.FILE_CONTENT


def _suffix(extension: str) -> str:
    """A name ending in ``.extension``."""
    return r"\." + extension + "$"


def _whole(body: str) -> str:
    """The whole name matching ``body``."""
    return r"\A" + body + r"\z"


def _dotted(body: str) -> str:
    """The whole name, optionally preceded by a dot."""
    return _whole(r"\.?" + body)


def _ends(body: str) -> str:
    """A name ending with ``body``, optionally preceded by a dot."""
    return r"\.?" + body + r"\z"


def _key_run(length: int) -> str:
    """A word of ``length`` key-like characters."""
    return r"\b[A-Za-z0-9/+-]{" + str(length) + r"}\b"


_ANY = r"[\s\S]*"

_KEY_BUNDLE = "Potential cryptographic key bundle"
_DATABASE = "Database file"
_SSH_KEY = "Private SSH key"
_MYSQL_HISTORY = "MySQL client command history file"
_PSQL_HISTORY = "PostgreSQL client command history file"
_PIDGIN = "Pidgin chat client account configuration file"
_XCHAT = "Hexchat/XChat IRC client server list configuration file"
_S3CMD = "S3cmd configuration file"
_TWITTER = "T command-line Twitter client configuration file"
_OPENVPN = "OpenVPN client configuration file"
_KEEPASS = "KeePass password manager database file"
_JENKINS_SSH = "Jenkins publish over SSH plugin file"
_JENKINS_CREDENTIALS = "Potential Jenkins credentials file"
_MEDIAWIKI = "Potential MediaWiki configuration file"
_RUBYGEMS = "Rubygems credentials file"
_MSBUILD = "Potential MSBuild publish profile"
_PCAP = "Network traffic capture file"

_DEFINITIONS: tuple[tuple[str, SecretType, str], ...] = (
    ("Azure storage standard key format", _C, _key_run(86)),
    ("Azure service bus standard key format", _C, _key_run(43)),
    ("Azure service configuration file", _F, _suffix("cscfg")),
    ("Decryption Key", _C, "CryptDeriveKey"),
    ("Encryption Key", _C, "CryptGenKey"),
    ("Encryption Key", _C, "HMACSHA1"),
    ("Machine Key", _C, "machinekey"),
    (_MSBUILD, _F, _suffix(r"pubxml(\.user)?")),
    ("RDP file", _F, _suffix("rdp")),
    ("Private client certificate", _F, _suffix("pfx")),
    (_KEY_BUNDLE, _F, _suffix("pkcs12")),
    (_KEY_BUNDLE, _F, _suffix("p12")),
    (_KEY_BUNDLE, _F, _suffix("asc")),
    ("Possible public key", _F, _suffix("pub")),
    (_JENKINS_CREDENTIALS, _F, "^cred" + _ANY + "xml"),
    (_DATABASE, _F, _suffix("mdf")),
    (_DATABASE, _F, _suffix("sdf")),
    (_DATABASE, _F, _suffix("sql")),
    (_DATABASE, _F, _suffix("sqlite")),
    (_MYSQL_HISTORY, _F, "^" + _ANY + "mysql_history"),
    (_PSQL_HISTORY, _F, "^" + _ANY + "psql_history"),
    ("Ruby On Rails database configuration file", _F, "^database" + _ANY + ".yml"),
    ("AWS access key", _C, _key_run(40)),
    (_PCAP, _F, _suffix("pcap")),
    (_PIDGIN, _F, "accounts" + _ANY + ".xml"),
    ("Wordpress configuration file", _F, "wp-config" + _ANY + ".php"),
    (_XCHAT, _F, ".?xchat2" + _ANY + ".conf"),
    (_S3CMD, _F, _suffix("s3cfg")),
    (_TWITTER, _F, _suffix("trc")),
    (_OPENVPN, _F, _suffix("ovpn")),
    ("Ruby On Rails secret token configuration file", _F, "secret_token"),
    ("OmniAuth configuration file", _F, _suffix("omniauth")),
    ("Carrierwave configuration file", _F, "carrierwave"),
    ("Client SSH Config", _F, ".?ssh_config" + _ANY),
    ("Server SSH Config", _F, ".?sshd_config" + _ANY),
    (_KEEPASS, _F, _suffix("kdb")),
    ("Contains word: backup", _F, _suffix("backup")),
    (_JENKINS_SSH, _F, "jenkins.plugins.publish_over_ssh[^ ]*.xml"),
    (_MEDIAWIKI, _F, "LocalSettings[^ ]*php"),
    (_RUBYGEMS, _F, _dotted("gem/credentials")),
    ("SSH file", _F, _suffix("ssh")),
    ("Github Dev API key", _C, "jekyll_github_token[^ ]*"),
    ("DHCP server configs", _F, "dhcpd[^ ]*.conf"),
    ("Heroku Environment Variable", _C, "heroku config:set"),
    ("Jupyter Configuration file", _F, "jupyter[^ ]*config[^ ]*.json"),
    ("bitlocker", _F, _suffix("bek")),
    ("bitlocker", _F, _suffix("tpm")),
    ("bitlocker", _F, _suffix("fve")),
    ("java key store", _F, _suffix("jks")),
    ("openssl .key, apple .keychain, etc.", _F, _suffix("key")),
    ("passwordsafe", _F, _suffix("psafe3")),
    ("PKCS15 tokens", _F, _suffix("p15")),
    ("mozilla", _F, "cert8.db"),
    ("sql", _F, "connect.inc"),
    ("dbman", _F, "default.pass"),
    ("apache/nginx", _F, "htaccess"),
    ("openssh", _F, "id_dsa"),
    ("openssh", _F, "id_ecdsa"),
    ("openssh", _F, "id_ed25519"),
    ("openssh", _F, "id_rsa"),
    ("mozilla", _F, "key3.db"),
    ("typo3", _F, "localconf"),
    ("wikimedia", _F, "localsettings"),
    ("~/.netrc", _F, _suffix("netrc")),
    ("libpurple otr fingerprints", _F, "otr.fingerprints"),
    ("pgp", _F, "pgplog"),
    ("pgp", _F, "pgppolicy.xml"),
    ("pgp", _F, "pgpprefs.xml"),
    ("gnupg", _F, r"secring\.gpg"),
    ("sftp", _F, "sftp-config"),
    ("freebsd", _F, "spwd.bd"),
    (".net", _F, "users.xml"),
    ("bitcoin", _F, "wallet.dat"),
    (_SSH_KEY, _F, _whole(".*_rsa")),
    (_SSH_KEY, _F, _whole(".*_dsa")),
    (_SSH_KEY, _F, _whole(".*_ed25519")),
    (_SSH_KEY, _F, _whole(".*_ecdsa")),
    ("SSH configuration file", _F, _ends("ssh/config")),
    ("Potential cryptographic private key", _F, _whole("key(pair)?")),
    (_KEY_BUNDLE, _F, ".pkcs12$"),
    (_KEY_BUNDLE, _F, ".pfx$"),
    (_KEY_BUNDLE, _F, ".p12$"),
    (_KEY_BUNDLE, _F, ".asc$"),
    ("Pidgin OTR private key", _F, ".otr.private_key"),
    ("Shell command history file", _F, _dotted("(bash_|zsh_|z)?history")),
    (_MYSQL_HISTORY, _F, _dotted("mysql_history")),
    (_PSQL_HISTORY, _F, _dotted("psql_history")),
    ("PostgreSQL password file", _F, _dotted("pgpass")),
    ("Ruby IRB console history file", _F, _dotted("irb_history")),
    (_PIDGIN, _F, _ends(r"purple\/accounts\.xml")),
    (_XCHAT, _F, _ends(r"xchat2?\/servlist_?\.conf")),
    ("Irssi IRC client configuration file", _F, _ends(r"irssi\/config")),
    (
        "Recon-ng web reconnaissance framework API key database",
        _F,
        _ends(r"recon-ng\/keys\.db"),
    ),
    ("DBeaver SQL database manager configuration file", _F, _dotted("dbeaver-data-sources.xml")),
    ("Mutt e-mail client configuration file", _F, _dotted("muttrc")),
    (_S3CMD, _F, _dotted("s3cfg")),
    ("AWS CLI credentials file", _F, _ends("aws/credentials")),
    (_TWITTER, _F, _dotted("trc")),
    (_OPENVPN, _F, _suffix("ovpn")),
    ("Well, this is awkward... Gitrob configuration file", _F, _dotted("gitrobrc")),
    ("Shell configuration file", _F, _dotted("(bash|zsh)rc")),
    ("Shell profile configuration file", _F, _dotted("(bash_|zsh_)?profile")),
    ("Shell command alias configuration file", _F, _dotted("(bash_|zsh_)?aliases")),
    ("Potential Ruby On Rails database configuration file", _F, "database.yml"),
    ("PHP configuration file", _F, _whole(r"(.*)?config(\.inc)?\.php")),
    (_KEEPASS, _F, _suffix("kdb")),
    ("1Password password manager database file", _F, _suffix("agilekeychain")),
    ("Apple Keychain database file", _F, _suffix("keychain")),
    ("GNOME Keyring database file", _F, _whole("key(store|ring)")),
    (_PCAP, _F, _suffix("pcap")),
    ("SQL dump file", _F, _whole("sql(dump)?")),
    ("GnuCash database file", _F, _suffix("gnucash")),
    (_JENKINS_SSH, _F, "jenkins.plugins.publish_over_ssh.BapSshPublisherPlugin.xml"),
    (_JENKINS_CREDENTIALS, _F, "credentials.xml$"),
    ("Apache htpasswd file", _F, _dotted("htpasswd")),
    ("Configuration file for auto-login process", _F, _whole(r"(\.|_)?netrc")),
    ("KDE Wallet Manager database file", _F, _suffix("kwallet")),
    (_MEDIAWIKI, _F, "LocalSettings.php"),
    ("Tunnelblick VPN configuration file", _F, _suffix("tblk")),
    (_RUBYGEMS, _F, _ends("gem/credentials")),
    (_MSBUILD, _F, r"\A*" + _suffix(r"pubxml(\.user)?")[:-1] + r"\z"),
    ("Sequel Pro MySQL database manager bookmark file", _F, "Favorites.plist"),
    ("Little Snitch firewall configuration file", _F, "configuration.user.xpl"),
    ("Day One journal file", _F, _suffix("dayone")),
    ("Tugboat DigitalOcean management tool configuration", _F, _dotted("tugboat")),
    ("git-credential-store helper credentials file", _F, _dotted("git-credentials")),
    ("Git configuration file", _F, _dotted("gitconfig")),
    ("Chef Knife configuration file", _F, "knife.rb"),
    ("Chef private key", _F, _ends(r"chef/(.*)\.pem")),
    ("cPanel backup ProFTPd credentials file", _F, "proftpdpasswd"),
    ("Robomongo MongoDB manager configuration file", _F, "robomongo.json"),
    ("FileZilla FTP configuration file", _F, "filezilla.xml"),
    ("FileZilla FTP recent servers file", _F, "recentservers.xml"),
    ("Ventrilo server configuration file", _F, "ventrilo_srv.ini"),
    ("Docker configuration file", _F, _dotted("dockercfg")),
    ("NPM configuration file", _F, _dotted("npmrc")),
    ("Terraform variable config file", _F, "terraform.tfvars"),
    ("Environment configuration file", _F, _dotted("env")),
    ("Secret", _C, r"(\n[a-z0-9_\-]+[:;\|][a-z0-9_\-]+){10,}"),
    ("API secret key", _C, r"(api|secret)key\s*[\=]+"),
    ("iCalender", _C, "BEGIN:VCALENDAR"),
    ("secret key", _C, r"""\s*[a-z0-9\-_]*secret[key]+\s*[:=]+\s*["']\S+["']"""),
    ("HtPasswds", _C, "^[a-z0-9]+:[a-z0-9]{13}$"),
    ("Secret finder", _C, r"secret\s*[\=]+"),
)


@lru_cache(maxsize=None)
def load_patterns() -> tuple[Pattern, ...]:
    """Return the built-in secret patterns, compiled, in their fixed order."""
    return tuple(
        Pattern(description, secret_type, value)
        for description, secret_type, value in _DEFINITIONS
    )


def scan_filename(
    filename: str, patterns: Optional[Iterable[Pattern]] = None
) -> Optional[Pattern]:
    """Return the first file-name pattern matching ``filename``, or None."""
    if patterns is None:
        patterns = load_patterns()
    return next(
        (
            pattern
            for pattern in patterns
            if pattern.secret_type is SecretType.FILENAME and pattern.matches(filename)
        ),
        None,
    )