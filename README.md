# dotsetup

`dotsetup` sets up a machine from a dotfiles repository. The repository
holds a `.anyconfig/` directory of YAML task files. Each task file lists
the task's dependencies and the steps that install it: packages, shell
commands, directories, backups, links, copies, moves and environment
variables.

It is meant for Linux systems that use `apt` (Debian family) or `pacman`
(Arch family). Commands are run through `/bin/bash`, and `sudo` is used
where a step needs it.

## Installation

```
pip install .
```

This installs the `dotsetup` command.

## Configuration

The machine configuration is read from `/etc/anyconfig/anyconfig.yml`:

```yaml
os: arch
installer: "sudo pacman --needed --noconfirm -Sy "
uninstaller: "sudo pacman --noconfirm -R "
repo: /home/me/dotfiles
cpu: x86_64
```

If the file is missing, `dotsetup` asks whether to create it. If you agree,
it detects the operating system (`debian` or `arch`, from whether `apt` or
`pacman` is installed) and the CPU (`x86_64` or `aarch64`, from `lscpu`).
Then it asks where the repository is. You can:

- type its path,
- browse to it with a directory picker,
- create a new GitHub repository and clone it, or
- clone one of your existing GitHub repositories.

The last two use the GitHub CLI (`gh`). It is installed and logged in
first if needed. A `.anyconfig` directory is created in the repository if
there is none.

## Task files

A task is either a single file `<repo>/.anyconfig/<name>.yml`, or a
directory `<repo>/.anyconfig/<name>/`. A directory holds related task
files. A file in it named after the directory is always run when the
directory is selected. Every file in `.anyconfig/` must be a `.yml` file,
and directories may not contain further directories. A file named
`template.yml` is never offered.

```yaml
dependencies:
  os:
    - arch
  task:
    - base
  noCommand:
    - nvim
  user:
    - noroot
install:
  pacman:
    - neovim
  mkdir:
    - "{home}/.config{backup}"
  ln:
    - "Link nvim config | {repo}/nvim > {home}/.config"
  env:
    - "EDITOR = nvim"
```

A file may repeat `dependencies:` / `install:` pairs to describe
variants for different operating systems. When there are several, the
variant whose `os` dependency matches the configured `os` is used.

Dependency kinds:

- `os`: the operating system the task is for. Tasks for another system are
  hidden from selection, and running one is refused.
- `task`: other tasks (names relative to `.anyconfig/`, without `.yml`) that
  run before this one.
- `noDir`: skip the task if any of the given paths already exists.
- `noCommand`: skip the task if any of the given commands is already on the
  `PATH`.
- `user: [noroot]`: refuse to run the task as root.

Install kinds:

- `pkg`: install with the configured `installer` command.
- `apt`, `pacman`: install with that package manager. The step is skipped
  if that package manager is not present.
- `yay`: install from the AUR with `yay`.
- `cmd`: run a shell command.
- `mkdir`: create a directory. With `{backup}` in the argument, an existing
  one is moved away first; without it, an existing one is left alone.
- `backup`: move a path to `~/.old/`.
- `ln`, `cp`, `mv`: written as `source > destination`. These symlink, copy
  recursively, or move the source into the destination. Whatever already
  sits at the destination under the same name is moved to `~/.old/` first.
- `env`: written as `NAME = value`. Sets an environment variable for the
  rest of the run.

Any argument may start with a display name followed by ` | `. The
placeholders `{user}`, `{home}` and `{repo}` are filled in from the
configuration. A shell command containing `{ignore}` has its failure
ignored. Chains written with ` && ` run every part, even after one fails.

## Usage

Run it without arguments to get a menu:

```
dotsetup
```

The menu offers:

- **Install existing tasks in repo**: choose tasks by number or range (for
  example `1,3-4`), then choose from inside any selected directories. The
  chosen tasks run in dependency order, with a spinner and progress bar.
- **Create new task in repo**: copy `/opt/anyconfig/etc/template.yml` into
  a new single-file task, a new task directory, or an existing directory.
  The new file is then opened in `$EDITOR` (`vim` if unset).
- **Update anyconfig**: pull `/opt/anyconfig` and reinstall it with pip.
  Shown only when `/tmp/anyconfig_update` exists.
- **Update Repository**: `git pull` the dotfiles repository. Shown only
  when `/tmp/repo_update` exists.

Install the given task files directly, without the menu:

```
dotsetup -i neovim.yml shell/zsh.yml
```

Options:

- `-i FILE...`: install the listed task files (relative to `.anyconfig/`)
  in dependency order.
- `-s`: with `-i`, run each action in turn with a plain log line instead of
  the progress display.
- `-d`: debug mode. Shell commands run attached to the terminal, and the
  progress display is off.

## Library use

The modules can also be used directly:

- `dotsetup.task.parse_task` and `get_task` read task files.
- `dotsetup.action.get_actions` turns a task file into `runner.Action`
  objects.
- `dotsetup.runner.run_actions` and `run_action` run actions.
- `dotsetup.command` provides `run`, `ln`, `cp`, `mv`, `mkdir` and
  `backup`.
- `dotsetup.gh.check_anyconfig_update` and `check_repo_update` create the
  `/tmp` flag files when a checkout is behind its remote.

## Limitations

- The `dotsetup` command does not check for updates itself. The update
  entries appear only once something has called
  `gh.check_anyconfig_update` or `gh.check_repo_update`, or the flag files
  were created by other means.
- Nothing is ever uninstalled. The `uninstaller` setting is stored in the
  configuration but not used.
- Only Debian-family and Arch-family systems are detected. Configuration
  setup stops on any other system.
- Prompts are plain numbered lists read line by line. There is no
  full-screen interface.