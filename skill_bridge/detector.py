"""Guess a project's stack from its manifest files."""

import re
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Optional

import yaml

from skill_bridge.logging_config import get_logger
from skill_bridge.models import AgentConfig
from skill_bridge.utils import read_json_safe

logger = get_logger(__name__)


@dataclass(frozen=True)
class DetectedProject:
    kind: str
    display_name: str
    config_file: str
    name: Optional[str] = None
    version: Optional[str] = None
    languages: tuple[str, ...] = ()
    frameworks: tuple[str, ...] = ()
    dev_commands: tuple[str, ...] = ()
    build_commands: tuple[str, ...] = ()
    test_commands: tuple[str, ...] = ()

    def to_agent_config(self, project_path: Path) -> AgentConfig:
        return AgentConfig(
            project_name=self.name or Path(project_path).resolve().name,
            languages=list(self.languages),
            frameworks=list(self.frameworks),
            dev_commands=list(self.dev_commands),
            build_commands=list(self.build_commands),
            test_commands=list(self.test_commands),
        )


@dataclass
class _Manifest:
    """Lazily parsed manifest files of one project directory."""

    root: Path
    _cache: dict[str, Any] = field(default_factory=dict)

    def exists(self, name: str) -> bool:
        return (self.root / name).exists()

    def text(self, name: str) -> str:
        path = self.root / name
        try:
            return path.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            logger.warning("Cannot read %s: %s", path, exc)
            return ""

    def package_json(self) -> Optional[dict[str, Any]]:
        if "package.json" not in self._cache:
            payload, error = read_json_safe(self.root / "package.json")
            if error:
                logger.warning("Ignoring invalid package.json: %s", error)
            self._cache["package.json"] = payload if isinstance(payload, dict) else None
        return self._cache["package.json"]

    def toml(self, name: str) -> dict[str, Any]:
        if name not in self._cache:
            payload: dict[str, Any] = {}
            if self.exists(name):
                try:
                    payload = tomllib.loads(self.text(name))
                except tomllib.TOMLDecodeError as exc:
                    logger.warning("Ignoring invalid %s: %s", name, exc)
            self._cache[name] = payload
        return self._cache[name]


_NODE_LOCKFILES = (
    ("pnpm-lock.yaml", "pnpm"),
    ("yarn.lock", "yarn"),
    ("bun.lockb", "bun"),
)

# (dependency, kind, framework label), first match wins.
_NODE_FRAMEWORKS = (
    ("next", "nextjs", "Next.js"),
    ("nuxt", "nuxt", "Nuxt.js"),
    ("@angular/core", "angular", "Angular"),
    ("vue", "vue", "Vue.js"),
    ("react", "react", "React"),
    ("@nestjs/core", "node", "NestJS"),
    ("fastify", "node", "Fastify"),
    ("hono", "node", "Hono"),
    ("express", "node", "Express.js"),
)

_PYTHON_FRAMEWORKS = (
    ("django", "Django"),
    ("fastapi", "FastAPI"),
    ("flask", "Flask"),
)


def _check_flutter(manifest: _Manifest) -> Optional[DetectedProject]:
    if not manifest.exists("pubspec.yaml"):
        return None
    text = manifest.text("pubspec.yaml")
    try:
        pubspec = yaml.safe_load(text) or {}
    except yaml.YAMLError as exc:
        logger.warning("Ignoring invalid pubspec.yaml: %s", exc)
        pubspec = {}
    if not isinstance(pubspec, dict):
        pubspec = {}

    if "flutter:" in text or "flutter_" in text:
        return DetectedProject(
            kind="flutter",
            display_name="Flutter",
            config_file="pubspec.yaml",
            name=_str_or_none(pubspec.get("name")),
            version=_str_or_none(pubspec.get("version")),
            languages=("Dart",),
            frameworks=("Flutter",),
            dev_commands=("flutter run",),
            build_commands=("flutter build",),
            test_commands=("flutter test",),
        )
    return DetectedProject(
        kind="dart",
        display_name="Dart",
        config_file="pubspec.yaml",
        name=_str_or_none(pubspec.get("name")),
        version=_str_or_none(pubspec.get("version")),
        languages=("Dart",),
        dev_commands=("dart run",),
        test_commands=("dart test",),
    )


def _check_node(manifest: _Manifest) -> Optional[DetectedProject]:
    package = manifest.package_json()
    if package is None:
        return None

    deps: dict[str, Any] = {}
    for key in ("dependencies", "devDependencies"):
        if isinstance(package.get(key), dict):
            deps.update(package[key])

    kind, label = next(
        (
            (kind, label)
            for dependency, kind, label in _NODE_FRAMEWORKS
            if dependency in deps
        ),
        ("node", None),
    )
    frameworks: list[str] = []
    if kind == "node":
        frameworks.append("Node")
    if label is not None:
        frameworks.append(label)
    if kind == "nextjs":
        frameworks.append("React")

    runner = next(
        (tool for lockfile, tool in _NODE_LOCKFILES if manifest.exists(lockfile)), "npm"
    )
    scripts = package.get("scripts") if isinstance(package.get("scripts"), dict) else {}
    dev = "dev" if "dev" in scripts else ("start" if "start" in scripts else None)

    return DetectedProject(
        kind=kind,
        display_name=label or "Node.js",
        config_file="package.json",
        name=_str_or_none(package.get("name")),
        version=_str_or_none(package.get("version")),
        languages=("TypeScript",) if "typescript" in deps else ("JavaScript",),
        frameworks=tuple(frameworks),
        dev_commands=(f"{runner} run {dev}",) if dev else (),
        build_commands=(f"{runner} run build",) if "build" in scripts else (),
        test_commands=(f"{runner} test",) if "test" in scripts else (),
    )


def _check_java(manifest: _Manifest) -> Optional[DetectedProject]:
    gradle_file = next(
        (name for name in ("build.gradle.kts", "build.gradle") if manifest.exists(name)),
        None,
    )
    if not manifest.exists("pom.xml") and gradle_file is None:
        return None

    config_file = "pom.xml" if manifest.exists("pom.xml") else gradle_file
    text = manifest.text(config_file)
    spring = "spring-boot" in text or "org.springframework.boot" in text
    if config_file == "pom.xml":
        dev = ("mvn spring-boot:run",) if spring else ()
        build, test = ("mvn package",), ("mvn test",)
    else:
        dev = ("./gradlew bootRun",) if spring else ()
        build, test = ("./gradlew build",), ("./gradlew test",)

    return DetectedProject(
        kind="springboot" if spring else "java",
        display_name="Spring Boot" if spring else "Java",
        config_file=config_file,
        languages=("Java",),
        frameworks=("Spring Boot",) if spring else (),
        dev_commands=dev,
        build_commands=build,
        test_commands=test,
    )


def _check_python(manifest: _Manifest) -> Optional[DetectedProject]:
    candidates = [
        name
        for name in ("pyproject.toml", "requirements.txt", "setup.py")
        if manifest.exists(name)
    ]
    if not candidates:
        return None

    content = "\n".join(
        manifest.text(name).lower()
        for name in ("requirements.txt", "pyproject.toml")
        if name in candidates
    )
    framework = next(
        (label for dependency, label in _PYTHON_FRAMEWORKS if dependency in content), None
    )
    project = manifest.toml("pyproject.toml").get("project") or {}

    dev: tuple[str, ...] = ()
    if framework == "Django" and manifest.exists("manage.py"):
        dev = ("python manage.py runserver",)
    elif framework == "Flask":
        dev = ("flask run",)
    uses_pytest = "pytest" in content or manifest.exists("tests")

    return DetectedProject(
        kind="python",
        display_name=framework or "Python",
        config_file=candidates[0],
        name=_str_or_none(project.get("name")) if isinstance(project, dict) else None,
        version=_str_or_none(project.get("version")) if isinstance(project, dict) else None,
        languages=("Python",),
        frameworks=(framework,) if framework else (),
        dev_commands=dev,
        build_commands=("python -m build",) if "pyproject.toml" in candidates else (),
        test_commands=("pytest",) if uses_pytest else (),
    )


def _check_go(manifest: _Manifest) -> Optional[DetectedProject]:
    if not manifest.exists("go.mod"):
        return None
    match = re.search(r"^module\s+(\S+)", manifest.text("go.mod"), re.MULTILINE)
    return DetectedProject(
        kind="go",
        display_name="Go",
        config_file="go.mod",
        name=match.group(1).rsplit("/", 1)[-1] if match else None,
        languages=("Go",),
        dev_commands=("go run .",),
        build_commands=("go build ./...",),
        test_commands=("go test ./...",),
    )


def _check_rust(manifest: _Manifest) -> Optional[DetectedProject]:
    if not manifest.exists("Cargo.toml"):
        return None
    package = manifest.toml("Cargo.toml").get("package") or {}
    if not isinstance(package, dict):
        package = {}
    return DetectedProject(
        kind="rust",
        display_name="Rust",
        config_file="Cargo.toml",
        name=_str_or_none(package.get("name")),
        version=_str_or_none(package.get("version")),
        languages=("Rust",),
        dev_commands=("cargo run",),
        build_commands=("cargo build",),
        test_commands=("cargo test",),
    )


def _check_generic(manifest: _Manifest) -> Optional[DetectedProject]:
    if not manifest.exists(".git"):
        return None
    return DetectedProject(kind="generic", display_name="Project", config_file=".git")


_CHECKS: tuple[Callable[[_Manifest], Optional[DetectedProject]], ...] = (
    _check_flutter,
    _check_node,
    _check_java,
    _check_python,
    _check_go,
    _check_rust,
    _check_generic,
)


def detect_project(project_path: Path) -> Optional[DetectedProject]:
    """Return the first matching project kind, or ``None``."""
    manifest = _Manifest(Path(project_path))
    for check in _CHECKS:
        detected = check(manifest)
        if detected is not None:
            logger.debug("Detected %s project from %s", detected.kind, detected.config_file)
            return detected
    return None


def _str_or_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None
