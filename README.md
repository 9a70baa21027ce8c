# doot

`doot` is the core of a dotfiles manager. You keep your configuration files
in one directory, which is usually a git repository. `doot` works out where
each file belongs in a target directory, usually your home directory, and
links it into place.

The package is a library with no dependencies beyond the standard library.
It provides the building blocks described below.

## Configuration

`doot.scan.Config` is a dataclass that holds the settings the other modules
read:

- `target_dir`: where links are installed. Defaults to your home directory.
- `implicit_dot`, `implicit_dot_ignore`
- `exclude_files`, `include_files`, `explore_excluded_dirs`
- `hosts`: hostname to directory
- `diff_command`

You build a `Config` in code. The package does not read configuration files.

## Scanning the dotfiles directory

`doot.scan.create_filter(config, ignore_doot_crypt)` turns the `exclude_files`
and `include_files` glob lists of a `Config` into a `FileFilter`. The pattern
`**/.*` in `exclude_files` becomes a check on file names that skips hidden
entries. When `ignore_doot_crypt` is true, entries with `.doot-crypt` in
their name are skipped as well.

`doot.scan.scan_directory(directory, file_filter)` returns the relative paths
of every file that passes the filter, in sorted order. An excluded directory
is not entered. The exception is when `explore_excluded_dirs` is set: the
directory is then searched, and files inside it that match `include_files`
are still kept.

`GlobCollection(patterns).matches(path)` is the glob matcher used for these
checks. In a pattern, `*` and `?` stop at `/`, `**` crosses it, and
`[...]`, `[!...]` and `{a,b}` are supported.

## Mapping sources to targets

`doot.mapping.FileMapping(dotfiles_dir, config, source_files, hostname, prompt)`
decides the target path of every dotfile. `map_source_to_target(source)`
shows the result for a single path. The mapping follows these rules:

- With `implicit_dot`, a leading dot is added to paths that do not already
  start with one, so `foo/bar` becomes `.foo/bar`. Paths whose top-level name
  is listed in `implicit_dot_ignore` are left alone.
- `.doot-crypt` markers are removed, so `file2.doot-crypt.txt` is installed as
  `file2.txt`.
- The `hosts` table maps hostnames to directories. Files under the directory
  of the current host (or of `hostname`, if given) override shared files with
  the same target. Directories of other hosts, and the internal `doot/`
  directory, are never installed. `doot.hostfilter.get_hostname_filter(hosts,
  hostname)` builds these rules.
- If two files that are not host-specific map to the same target, the first
  one is kept.

`install_new_links()` creates the missing symlinks and returns the targets it
created or replaced. Sometimes a target already exists and cannot be replaced
silently. In that case the `prompt` callable is called with an options string
and a message, and must return one lower-case letter. The default asks on the
terminal. The possible answers are:

- replace the target,
- skip it,
- show a diff,
- adopt the existing file into the dotfiles directory.

`remove_stale_links(previous_links)` removes links that are no longer mapped.
A link is removed only if it still points into the dotfiles directory, and
directories left empty by the removal are cleaned up. `installed_targets()`
returns the resulting `SymlinkCollection`. Targets the user chose to skip are
left out of it.

## Installed links

`doot.symlinks.SymlinkCollection` records which link points to which dotfile:

```python
from doot.symlinks import SymlinkCollection

links = SymlinkCollection()
links.add("/some/path", "/some/target")
links.add("/another/path", "/another/target")

print(links.print_list())
# /another/path -> /another/target
# /some/path -> /some/target

print(links.to_json())
# {"/another/path":"/another/target","/some/path":"/some/target"}
```

`doot.symlinks.format_installed(links, as_json)` renders a collection in
either form.

`doot.changes.format_changes(added, removed, home, color)` returns the lines
that summarise an update:

- `+ path` for each added link and `- path` for each removed one, with paths
  shown relative to `home`.
- At most five entries per side, followed by an `N more` line.
- Optional ANSI colours.
- `No changes made` when both lists are empty.

## Adding and restoring files

`doot.addfile.process_added_file(path, params)` works out where a file from
the target directory should be stored in the dotfiles directory. It applies
the implicit-dot, encryption, include/exclude and host-specific-directory
rules given in an `AddFileParams`, and returns the path relative to the
dotfiles directory. When the file cannot be added it raises `AddFileError`,
for example because the file:

- is missing,
- is a directory,
- lies outside the target directory,
- has a name that `implicit_dot` cannot produce,
- is excluded.

`add_doot_crypt_extension(rel_path)` marks a path for encryption. For example,
`file1` becomes `file1.doot-crypt` and `file.with.some.dots` becomes
`file.with.some.doot-crypt.dots`. `check_is_included(rel_path,
include_files, exclude_files)` raises `AddFileError` if the path or any of
its parents is excluded and not included.

`doot.restore.restore_files(input_files, installed_links, dotfiles_dir)`
does the reverse. Each named link, or the dotfile behind it, is moved back
over the link. The entry is dropped from `installed_links`, and directories
left empty in the dotfiles directory are removed. The function returns how
many files were restored. `restore_file(...)` does the same for a single
absolute path and raises `RestoreError` on failure.

## Encrypted files

`doot.crypt` checks whether a repository is set up for git-crypt. A key file
under `.git/git-crypt/keys/default` and the doot block in
`.git/info/attributes` must both be present, which
`git_crypt_is_initialized(dotfiles_dir)` reports. The module also offers:

- `append_git_attributes(dotfiles_dir)` adds the attributes block. It raises
  `NotARepositoryError` if no `.git` is found within a few parent levels.
- `contains_crypt_files(directory)` reports whether a tree holds any
  `.doot-crypt` entries.

## Repository shorthand

`doot.remote.get_git_url(repo)` expands a `user/repo` shorthand into
`https://github.com/user/repo.git`. Any other value is returned unchanged.

## What the package does not do

- It has no command-line program.
- It does not read a configuration file from the dotfiles directory.
- It does not keep a cache of installed links between runs. You pass the
  previous `SymlinkCollection` yourself.
- It does not run hooks.
- It does not run `git` or `git-crypt` to clone, pull, encrypt, lock or
  unlock a repository. It only inspects and prepares the files those tools
  use.