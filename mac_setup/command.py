import logging
import shlex
import shutil
import subprocess
from typing import TYPE_CHECKING, List, Optional, Sequence

from rich.markup import escape

from mac_setup.ui import NordColors, console, print_message, print_warning

if TYPE_CHECKING:
    from mac_setup.context import Environment

logger = logging.getLogger("mac_setup")


def format_command(cmd: Sequence[str]) -> str:
    return " ".join(shlex.quote(str(part)) for part in cmd)


class CommandRunner:
    """Runs external commands with consistent logging.

    Every task goes through one of these so tests can swap in a recorder.
    """

    def run(
        self,
        cmd: Sequence[str],
        env: Optional["Environment"] = None,
        check: bool = True,
        capture_output: bool = True,
        input_text: Optional[str] = None,
        timeout: Optional[float] = None,
        label: Optional[str] = None,
    ) -> subprocess.CompletedProcess:
        """
        Executes a command and returns the CompletedProcess.

        Args:
            cmd: Command and arguments as a list
            env: Environment context layered over os.environ
            check: Raise CalledProcessError on a non-zero exit
            capture_output: Capture stdout/stderr instead of streaming them
            input_text: Text fed to the command's stdin
            timeout: Optional timeout in seconds
            label: Shown and logged in place of the arguments, for commands
                that carry a whole script inline

        Returns:
            CompletedProcess instance with command results
        """
        argv: List[str] = [str(part) for part in cmd]
        cmd_str = label or format_command(argv)
        logger.debug(f"Running command: {cmd_str}")
        if not capture_output:
            print_message(
                f"Running: {cmd_str[:80]}{'...' if len(cmd_str) > 80 else ''}",
                NordColors.SNOW_STORM_1,
                "→",
            )
        result = subprocess.run(
            argv,
            input=input_text,
            text=True,
            capture_output=capture_output,
            timeout=timeout,
            env=env.to_dict() if env is not None else None,
        )
        if result.stdout:
            logger.debug(f"stdout: {result.stdout.strip()}")
        if result.stderr:
            logger.debug(f"stderr: {result.stderr.strip()}")
        if check and result.returncode != 0:
            raise subprocess.CalledProcessError(
                result.returncode, argv, output=result.stdout, stderr=result.stderr
            )
        return result

    def which(self, name: str, env: Optional["Environment"] = None) -> Optional[str]:
        path = env.to_dict().get("PATH") if env is not None else None
        return shutil.which(name, path=path)

    def succeeds(self, cmd: Sequence[str], env: Optional["Environment"] = None) -> bool:
        """Return True if ``cmd`` exits 0. A missing executable counts as failure."""
        try:
            return self.run(cmd, env=env, check=False).returncode == 0
        except OSError:
            return False

    def try_run(
        self,
        cmd: Sequence[str],
        warning: Optional[str] = None,
        env: Optional["Environment"] = None,
        capture_output: bool = True,
        input_text: Optional[str] = None,
        label: Optional[str] = None,
    ) -> Optional[subprocess.CompletedProcess]:
        """
        Run ``cmd``, turning failure into a warning instead of an exception.

        With ``warning`` unset the failure is only logged, for steps whose
        outcome does not matter to the user.
        """
        cmd_str = label or format_command(cmd)
        try:
            return self.run(
                cmd,
                env=env,
                capture_output=capture_output,
                input_text=input_text,
                label=label,
            )
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or "").strip()
            logger.debug(f"Command failed ({e.returncode}): {cmd_str} {stderr}")
            if warning:
                print_warning(warning)
                if stderr:
                    console.print(f"[dim]{escape(stderr.splitlines()[-1])}[/dim]")
        except OSError as e:
            logger.debug(f"Could not execute {cmd_str}: {e}")
            if warning:
                print_warning(f"{warning} ({e})")
        return None
