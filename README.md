# dockkit

Small tools for working with container images.

- **imageinfo** reports what an image holds: its environment variables,
  exposed ports and user, the Dockerfile rebuilt from the image history, and
  file names in its layers that look like secrets. It can also extract the
  layers added by `ADD` or `COPY`.
- **docker2exe** builds launchers that run a command inside an image through
  the local `docker` command, passing their arguments on. The launchers are
  Python zip applications; the image can be embedded in them.
- `dockkit.ping_controller.PingReconciler` turns a `Ping` resource into a
  Kubernetes `Job` manifest that pings a host a set number of times.

## Installation

```
pip install .
```

With the test dependencies:

```
pip install ".[test]"
```

Both commands call the `docker` executable. `docker2exe` also needs `make`,
and `gzip` when `--embed` is used.

## Analysing an image

```
imageinfo nginx:latest
```

If `docker image inspect` does not find the image, it is pulled first. The
report shows:

- the Docker version and the graph driver
- the environment variables and the open ports
- the image user, or "User is root" when none is set
- "Potential secrets": files in any layer whose names match a known secret
  pattern such as `id_rsa`, `.pgpass` or `credentials.xml`
- "Dockerfile": the history commands cleaned up to read like a Dockerfile,
  with the files each `ADD` or `COPY` step added

Options:

| Option | Meaning |
| --- | --- |
| `-f FILE` | analyse every image named in FILE, one per line |
| `-v` | verbose: every history entry and every file of every layer |
| `-filter=BOOL` | leave noise paths such as `node_modules/` out of file lists (default true) |
| `-x` | extract `ADD`/`COPY` layers into `./<image name>/`, with a `mapping.txt` |
| `-sV=VERSION` | Docker API version to use, e.g. `-sV=1.36` |

## Building a launcher from an image

```
docker2exe --name mytool --image alpine
```

This writes one launcher per target to `./dist`, named
`mytool-<os>-<arch>` (`.pyz` for Windows targets). The default targets are
`darwin/amd64`, `darwin/arm64`, `linux/amd64` and `windows/amd64`. Every
launcher is the same Python zip application; the target only sets the file
name.

| Option | Meaning |
| --- | --- |
| `--name` | launcher name (required) |
| `--image` | image to run (required) |
| `--embed` | save the image with `docker save` and bundle it in the launcher |
| `--workdir`, `-w` | mount the current directory in the container at this path |
| `--env`, `-e` | `docker run -e` value (repeatable, comma separated) |
| `--volume`, `-v` | bind mount (repeatable, comma separated) |
| `--output` | output directory (default `./dist`) |
| `--target`, `-t` | `os/arch` to build for (repeatable, comma separated) |
| `--module` | module name written into the generated Makefile |

Without `--module`, the name is `github.com/<user>/<name>` from the current
user name.

A launcher checks whether the image is present; if not, it loads the
embedded copy or pulls it. It then prints and runs
`docker run --rm [-it] ... <image> <arguments>`. The `DOCKER` environment
variable selects a different docker executable.

## Using the library

```python
from dockkit.secrets import load_patterns, scan_filename
from dockkit.ignore import is_noise
from dockkit.layers import clean_string

patterns = load_patterns()
print(scan_filename("home/app/.ssh/id_rsa", patterns))
print(is_noise("web/node_modules/left-pad/index.js"))   # True
print(clean_string("/bin/sh -c apt-get update && apt-get install -y curl"))
```

- `dockkit.layers.parse_image_archive` reads a `docker save` tar stream;
  `attach_layers`, `format_dockerfile` and `extract_layers` work on its result.
- `dockkit.imageinfo.DockerEngine` and `analyze` drive the `imageinfo` report.
- `dockkit.generator.Generator` and `dockkit.shim.Shim` build the launchers
  and run containers.
- `dockkit.ping_types.Ping` and `PingList` read and write resource
  dictionaries; `PingReconciler.build_job` returns the Job manifest for a Ping.

## What it does not do

- `PingReconciler` does not talk to a Kubernetes cluster itself. It calls a
  client object you supply (`get(namespace, name)` and `create(obj)`); there
  is no controller manager, watch loop, health endpoint or CRD installation.
- `imageinfo` only checks file names; file contents are not scanned for
  secrets, though `load_patterns` includes content patterns.
- `docker2exe` does not produce native binaries; its launchers need Python 3
  on the machine that runs them.

## Running the tests

```
pytest
```