"""Path patterns for files that are noise when listing an image's layers."""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Iterable

_ANCHOR = "(^|/)"
_STYLE = r"\.(css|less|scss|styl)$"


def _wrap(prefix: str, bodies: Iterable[str], suffix: str = "") -> tuple[str, ...]:
    return tuple(prefix + body + suffix for body in bodies)


# Fragments that may appear anywhere in a path.
_ANYWHERE = (
    ".npm/", "usr/share/", "cpplint.py", "node_modules/", "bower_components/",
    "erlang.mk", "Godeps/_workspace/", ".indent.pro", "third[-_]?party/",
    "3rd[-_]?party/", "vendors?/", "extern(al)?/", "bootstrap-datepicker/",
    "jquery.fn.gantt.js", "jquery.fancybox.(js|css)", "fuelux.js",
    "jquery.dataTables.js", "bootbox.js", "pdf.worker.js", "leaflet.draw-src.js",
    "leaflet.draw.css", "Control.FullScreen.css", "Control.FullScreen.js",
    "leaflet.spin.js", "wicket-leaflet.js", ".sublime-project",
    ".sublime-workspace", ".vscode", r"\.xctemplate/", r"\.imageset/",
    "Realm.framework", "RealmSwift.framework", "octicons.css",
    "sprockets-octicons.scss", "proguard.pro", "proguard-rules.pro",
)

_FRAMEWORKS = ("Crashlytics", "Fabric", "BuddyBuildSDK")

_ENDINGS = ("gitattributes", "gitignore", "gitmodules", "run.n", ".[Dd][Ss]_[Ss]tore")

_TOP_DIRECTORIES = (
    "[Dd]ependencies", "deps", "debian", "[Tt]ests?/fixtures", "[Ss]pecs?/fixtures",
    "vignettes", "inst/extdata", "puphpet",
)

_WHOLE_PATHS = ("rebar", r"fabfile\.py", "waf", ".osx", "Vagrantfile", "Jenkinsfile")

_EXTJS_DIRECTORIES = (
    ".sencha", "docs", "builds", "cmd", "examples", "locale", "packages",
    "plugins", "resources", "src", "welcome",
)

_DIRECTORIES = (
    "cache", "dist", "[Vv]+endor", "ace-builds", "MathJax",
    "docs?/_?(build|themes?|templates?|static)", "admin_media", "env",
    "Carthage", "Sparkle", "gradle/wrapper", r"\.mvn/wrapper", r"\.google_apis",
) + _wrap("extjs/", _EXTJS_DIRECTORIES)

_FILE_NAMES = (
    "configure", "config.guess", "config.sub", "gradlew", r"gradlew\.bat",
    "mvnw", r"mvnw\.cmd", "activator", r"activator\.bat",
)

_M4_MACROS = ("aclocal", "libtool", "ltoptions", "ltsugar", "ltversion", "lt~obsolete")

_NAME_PREFIXES = (
    "tiny_mce/(langs|plugins|themes|utils)",
    r"[Cc]ode[Mm]irror/(\.+\.\.+/)?(lib|mode|theme|addon|keymap|demo)",
)

_SCRIPTS = (
    "effects", "controls", "dragdrop", "dojo", "MochiKit", "ckeditor", "Chart",
    "shCore", "shLegacy", "html5shiv",
)

_SCRIPT_FAMILIES = ("jquery", "yahoo-", "yui", "tiny_mce", "shBrush", "angular", "cordova")

_STYLESHEETS = ("font-awesome", "foundation", "normalize", "skeleton", "animate")

_STYLE_DIRECTORIES = ("font-awesome", "[Bb]ourbon")

_EXTJS_FILE_TYPES = ("js", "xml", "txt", "html", "properties")

# Expressions that begin at the start of the path or after a slash.
_ANCHORED_MISC = (
    r"bootstrap([^.]*)\.(js|css|less|scss|styl)$",
    r"custom\.bootstrap([^\.]*)(js|css|less|scss|styl)$",
    r"materialize\.(css|less|scss|styl|js)$",
    r"select2/.*\.(css|scss|js)$",
    r"jquery\.\.\.\.+(\.\.+)?\.js$",
    r"jquery\.ui(\.\.\.\.+(\.\.+)?)?(\.\.+)?\.(js|css)$",
    r"jquery\.(ui|effects)\.([^.]*)\.(js|css)$",
    r"jquery\.fileupload(-\.+)?\.js$",
    r"slick\.\.+.js$",
    r"Leaflet\.Coordinates-\.+\.\.+\.\.+\.src\.js$",
    r"prototype(.*)\.js$",
    r"mootools([^.]*)\.+\.\.+.\.+([^.]*)\.js$",
    r"fontello(.*?)\.css$",
    r"react(-[^.]*)?\.js$",
    r"flow-typed/.*\.js$",
    r"modernizr\.\.\.\.+(\.\.+)?\.js$",
    r"modernizr\.custom\.\.+\.js$",
    r"knockout-(\.+\.){3}(debug\.)?js$",
    r"jquery([^.]*)\.validate(\.unobtrusive)?\.js$",
    r"jquery([^.]*)\.unobtrusive\.ajax\.js$",
    r"[Mm]icrosoft([Mm]vc)?([Aa]jax|[Vv]alidation)(\.debug)?\.js$",
    r"cordova\.\.\.\.(\.\.)?\.js$",
)

_MISC = (
    r"(\.|-)min\.(js|css)$",
    r"([^\.]*)import" + _STYLE,
    r"(.*?)\.d\.ts$",
    r"(^|\.)d3(\.v\.+)?([^.]*)\.js$",
    r"-vsdoc\.js$",
    r"\.intellisense\.js$",
    r"^[Pp]ackages\..+\.\.+\.",
    r"foundation(\..*)?\.js$",
)

NOISE_PATTERNS: tuple[str, ...] = (
    _ANYWHERE
    + _wrap("", _FRAMEWORKS, ".framework/")
    + _wrap("", _ENDINGS, "$")
    + _wrap("^", _TOP_DIRECTORIES, "/")
    + _wrap("^", _WHOLE_PATHS, "$")
    + _wrap(_ANCHOR, _DIRECTORIES, "/")
    + _wrap(_ANCHOR, _FILE_NAMES, "$")
    + _wrap(_ANCHOR, _M4_MACROS, ".m4")
    + _wrap(_ANCHOR, _NAME_PREFIXES)
    + _wrap(_ANCHOR, _SCRIPTS, r"\.js$")
    + _wrap(_ANCHOR, _SCRIPT_FAMILIES, r"([^.]*)\.js$")
    + _wrap(_ANCHOR, _STYLESHEETS, _STYLE)
    + _wrap(_ANCHOR, _STYLE_DIRECTORIES, "/.*" + _STYLE)
    + _wrap(_ANCHOR + "extjs/.*?\\.", _EXTJS_FILE_TYPES, "$")
    + _wrap(_ANCHOR, _ANCHORED_MISC)
    + _MISC
)


@lru_cache(maxsize=None)
def noise_regex() -> re.Pattern:
    """Return one compiled expression matching any noise pattern."""
    return re.compile("|".join(NOISE_PATTERNS))


def is_noise(path: str) -> bool:
    """Return True if ``path`` is a file that is usually not worth listing."""
    return noise_regex().search(path) is not None