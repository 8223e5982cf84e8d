"""
Maven delivery goals.

Builds Maven projects and starts Spring Boot applications:

- ``maven-build`` versions the checkout, then runs ``mvn package``
- ``maven-spring-boot-run`` starts the application on a free port

The rules that wire them together live in ``rules/builtin/maven.yaml``.
"""

from __future__ import annotations

from pushline.core.commands import CommandRegistry, GeneratorRegistration
from pushline.core.executor import GoalExecutor
from pushline.core.machine import DeliveryMachine
from pushline.core.reporter import GoalStateReporter, LogNotifier, NotificationChannel
from pushline.errors import PortUnavailable, ProcessError
from pushline.goals.versioning import VERSION_CONTEXT_KEY, MavenVersionListener
from pushline.models.config import MavenConfig, PushlineConfig, RunConfig
from pushline.models.goals import ExternalUrl, Goal, GoalInvocation, GoalResult
from pushline.models.push import RepoRef
from pushline.rules.loader import RuleLoader
from pushline.tools.ports import PortAllocator
from pushline.tools.process import ProcessRunner

BUILD_GOAL = "maven-build"
RUN_GOAL = "maven-spring-boot-run"


MAVEN_GENERATOR = GeneratorRegistration(
    name="MavenGenerator",
    intent="create maven project",
    description="Creates a new Maven project",
    tags=("maven",),
    auto_submit=True,
    starting_point=RepoRef(owner="atomist-seeds", name="spring-rest", branch="master"),
)


class MavenBuildAction:
    """Runs the configured Maven build in the pushed checkout."""

    def __init__(self, runner: ProcessRunner, config: MavenConfig | None = None):
        self.runner = runner
        self.config = config or MavenConfig()

    async def __call__(self, invocation: GoalInvocation) -> GoalResult:
        log = invocation.progress_log
        try:
            output = await self.runner.run(
                self.config.executable,
                self.config.build_args,
                cwd=invocation.push.snapshot.base_dir,
                timeout=self.config.timeout,
            )
        except ProcessError as e:
            if e.output:
                log.write(e.output)
            log.write("Maven build failed: %s", e.message)
            return GoalResult.failure(e.message, code=1)

        log.write(output)
        version = invocation.context.get(VERSION_CONTEXT_KEY)
        return GoalResult.success(message=f"Built version {version}" if version else "Built")


class SpringBootRunAction:
    """Starts a Spring Boot application on the first free port in range."""

    def __init__(
        self,
        runner: ProcessRunner,
        allocator: PortAllocator,
        maven: MavenConfig | None = None,
        run: RunConfig | None = None,
    ):
        self.runner = runner
        self.allocator = allocator
        self.maven = maven or MavenConfig()
        self.run_config = run or RunConfig()

    async def __call__(self, invocation: GoalInvocation) -> GoalResult:
        log = invocation.progress_log
        try:
            port = await self.allocator.allocate(self.run_config.port_low, self.run_config.port_high)
        except PortUnavailable as e:
            log.write("Spring Boot run failed: %s", e)
            return GoalResult.failure(str(e), code=1)

        app_url = f"http://{self.run_config.url_host}:{port}"
        args = [a.replace("{port}", str(port)) for a in self.maven.run_args]

        try:
            output = await self.runner.run(
                self.maven.executable,
                args,
                cwd=invocation.push.snapshot.base_dir,
                timeout=self.maven.timeout,
            )
        except ProcessError as e:
            log.write("Spring Boot run command failed: %s", e.message)
            if e.output:
                log.write(e.output)
            return GoalResult.failure(e.message, code=1)

        if output:
            log.write(output)
        return GoalResult.success(
            external_urls=[ExternalUrl(label="http", url=app_url)],
            message=f"Started at {app_url}",
        )


def maven_goals(
    config: PushlineConfig,
    runner: ProcessRunner | None = None,
    allocator: PortAllocator | None = None,
) -> dict[str, Goal]:
    """
    Build the Maven goal catalog.

    Returns:
        Goals keyed by the name rule files refer to them by
    """
    runner = runner or ProcessRunner()
    allocator = allocator or PortAllocator(config.run.bind_host)

    build = Goal(
        name=BUILD_GOAL,
        display_name="maven build",
        action=MavenBuildAction(runner, config.maven),
    ).with_listener(MavenVersionListener(runner, config.maven))

    run = Goal(
        name=RUN_GOAL,
        display_name="maven spring boot run",
        action=SpringBootRunAction(runner, allocator, config.maven, config.run),
    )

    return {build.name: build, run.name: run}


def configure_maven_machine(
    config: PushlineConfig | None = None,
    channel: NotificationChannel | None = None,
    runner: ProcessRunner | None = None,
    allocator: PortAllocator | None = None,
) -> DeliveryMachine:
    """
    Assemble the Maven delivery machine.

    Loads the rule table named by ``config.rules_file`` or the built-in
    maven rules, and registers the Maven project generator.

    Raises:
        ConfigurationError: If the rule table is invalid
    """
    config = config or PushlineConfig()
    catalog = maven_goals(config, runner, allocator)
    loader = RuleLoader(catalog)
    rules = loader.load_file(config.rules_file) if config.rules_file else loader.load("maven")

    reporter = GoalStateReporter(
        channel=channel or LogNotifier(),
        notify=config.notifications.enabled,
    )
    commands = CommandRegistry()
    commands.register(MAVEN_GENERATOR)

    return DeliveryMachine("maven", rules, GoalExecutor(reporter), commands)
