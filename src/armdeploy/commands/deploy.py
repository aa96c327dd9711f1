"""Deploy a binary to ARM64 hardware over SSH and verify it runs.

Usage:
    armdeploy deploy --host <ip> --user <user> --binary <path> [--test-mode]
"""
import logging

from armdeploy.core import (
    ConfigLoader,
    EnvironmentProvider,
    FileSystemService,
    Logger,
    ProcessExecutor,
)
from armdeploy.deploy import (
    ConfigError,
    ConfigResolver,
    DEFAULT_ENV_FILE,
    DeploymentOrchestrator,
    RemoteCommandBuilder,
    write_report,
)

DEFAULT_TEST_DATA_DIR = "test-data"


def setup_parser(parser):
    """Setup argument parser for deploy command"""
    parser.add_argument(
        '--host',
        help='ARM64 host IP address (default: $ARM_HOST)'
    )
    parser.add_argument(
        '--user',
        help='SSH username (default: $ARM_USER)'
    )
    parser.add_argument(
        '--binary',
        help='Path to binary to deploy'
    )
    parser.add_argument(
        '--test-mode',
        action='store_true',
        help='Run in test mode (default: false)'
    )
    parser.add_argument(
        '--ssh-key',
        help='Path to SSH private key (default: $SSH_KEY)'
    )
    parser.add_argument(
        '--timeout',
        type=int,
        help='SSH connection timeout in seconds (default: 300)'
    )
    parser.add_argument(
        '--env-file',
        default=DEFAULT_ENV_FILE,
        help=f'KEY=value file loaded before flags (default: {DEFAULT_ENV_FILE})'
    )
    parser.add_argument(
        '--test-data',
        default=DEFAULT_TEST_DATA_DIR,
        help=f'Directory uploaded next to the binary if present (default: {DEFAULT_TEST_DATA_DIR})'
    )
    parser.add_argument(
        '--report',
        help='Write a JSON report of the run to this path'
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Log every ssh/scp command line'
    )


def run_deployment(
    args,
    filesystem: FileSystemService,
    process_executor: ProcessExecutor,
    env_provider: EnvironmentProvider,
    config_loader: ConfigLoader,
    logger: Logger
) -> int:
    """Resolve configuration, run the pipeline, map the outcome to an exit code.

    Returns:
        0 on success, 1 on configuration error or any mandatory phase failure
    """
    resolver = ConfigResolver(filesystem, config_loader, logger)
    try:
        config = resolver.resolve(
            args.env_file,
            env_provider.get_environ(),
            {
                'host': args.host,
                'user': args.user,
                'binary': args.binary,
                'test_mode': args.test_mode,
                'ssh_key': args.ssh_key,
                'timeout': args.timeout,
            }
        )
    except ConfigError as e:
        logger.error(str(e))
        return 1

    logger.info("🚀 Deploying to ARM64 hardware...")
    logger.info(f"   Host: {config.target}")
    logger.info(f"   Binary: {config.binary}")
    logger.info(f"   Test Mode: {str(config.test_mode).lower()}")
    if config.ssh_key:
        logger.info("🔑 Using SSH key directly (skipping ssh-agent)...")

    session = RemoteCommandBuilder().build(config)
    orchestrator = DeploymentOrchestrator(
        process_executor=process_executor,
        filesystem=filesystem,
        env_provider=env_provider,
        logger=logger
    )
    outcome = orchestrator.run(session, config.binary, args.test_data)

    if args.report:
        path = write_report(filesystem, args.report, config, outcome, orchestrator.staging_dir)
        logger.info(f"Report: {path}")

    if outcome.success:
        logger.info("✅ ARM64 deployment and testing completed successfully!")
        return 0

    logger.info("❌ ARM64 deployment or testing failed")
    return 1


def execute(args):
    """Execute deploy command.

    Facade that wires production dependencies into run_deployment().
    """
    from armdeploy.core import (
        ConsoleLogger,
        DotenvConfigLoader,
        RealFileSystemService,
        SubprocessExecutor,
        SystemEnvironmentProvider,
    )

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s"
    )

    filesystem = RealFileSystemService()
    return run_deployment(
        args,
        filesystem=filesystem,
        process_executor=SubprocessExecutor(),
        env_provider=SystemEnvironmentProvider(),
        config_loader=DotenvConfigLoader(filesystem),
        logger=ConsoleLogger()
    )
