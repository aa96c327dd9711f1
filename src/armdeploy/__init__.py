"""
armdeploy - Deploy and verify cross-compiled binaries on ARM64 hardware

A command-line interface that stages a locally built binary on a remote
board over SSH, runs a fixed verification script against it, and cleans
up the remote staging directory afterwards.
"""
import argparse
import sys

__version__ = "1.0.0"


class DeployArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that exits with 1 (not argparse's 2) on bad usage."""

    def error(self, message):
        self.print_usage(sys.stderr)
        print(f"Error: {message}", file=sys.stderr)
        print("Use --help for usage information", file=sys.stderr)
        sys.exit(1)


def main(argv=None):
    """Main CLI entry point"""
    from armdeploy.commands import deploy

    parser = DeployArgumentParser(
        prog='armdeploy',
        description='armdeploy: Deploy and test binaries on ARM64 hardware via SSH',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  armdeploy deploy --host 10.0.0.5 --user pi --binary ./minerd-arm64
  armdeploy deploy --binary ./minerd-arm64 --ssh-key ~/.ssh/id_lab --timeout 120
  ARM_HOST=10.0.0.5 ARM_USER=pi armdeploy deploy --binary ./minerd-arm64

Configuration is read from scripts/local_ci/arm-deployment.env, then the
environment (ARM_HOST, ARM_USER, SSH_KEY, SSH_OPTS, SSH_ASKPASS, TIMEOUT),
then flags. Later sources win.
        '''
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')

    subparsers = parser.add_subparsers(dest='command', help='Command to execute')

    # Deploy command
    deploy_parser = subparsers.add_parser('deploy', help='Deploy binary and run remote verification')
    deploy.setup_parser(deploy_parser)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    # Dispatch to command handler
    try:
        if args.command == 'deploy':
            sys.exit(deploy.execute(args))
    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        sys.exit(130)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc()
        sys.exit(1)
