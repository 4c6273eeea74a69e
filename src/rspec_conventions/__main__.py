"""Package entry point - composition root. Wire dependencies and run the CLI app."""

from rspec_conventions.infrastructure.di.container import RulesContainer
from rspec_conventions.interface.cli import CLIAppFactory, CLIDependencies


def main() -> None:
    """Entry point: wire dependencies at composition root, create app, run."""
    container = RulesContainer.get_instance()
    telemetry = container.get_telemetry_port()
    deps = CLIDependencies(
        load_config=container.get_config_loader,
        telemetry=telemetry,
        filesystem=container.get_filesystem_gateway(),
        configure_logging=telemetry.configure,
    )
    app = CLIAppFactory.create_app(deps)
    app()


if __name__ == "__main__":
    main()
