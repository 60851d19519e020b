"""Compile every define permutation of the shaders found in a directory tree.

A shader opts into permutations with a second line of the form
``#define SNAKE_PERMUTATIONS(A,B,C)``. One SPIR-V file is produced for each
combination of the listed defines. Its name ends in an 8-character bit string,
and bit ``i`` of that string is set when define ``i`` is active.
"""
from __future__ import annotations

import argparse
import os
import re
import shutil
import subprocess
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

SHADER_EXTENSIONS = (".vert", ".frag", ".rgen", ".rchit", ".rmiss", ".comp")
PERMUTATION_MARKER = "#define SNAKE_PERMUTATIONS"
MAX_PERMUTATIONS = 255
TARGET_ENV = "--target-env=vulkan1.3"


class TooManyPermutationsError(Exception):
    """Raised when a shader declares more permutations than can be encoded."""

    def __init__(self, path: str, count: int) -> None:
        super().__init__(
            f"Error: shader '{path}' has num_unique_permutations={count}, "
            f"max supported = {MAX_PERMUTATIONS}"
        )
        self.path = path
        self.count = count


@dataclass
class ShaderFile:
    """A shader source file and the defines it is permuted over."""

    path: str
    content: str = ""
    defines: list[str] = field(default_factory=list)


def default_compiler() -> str:
    """Path of glslc inside the Vulkan SDK named by ``VULKAN_SDK``."""
    return os.path.join(os.environ.get("VULKAN_SDK", ""), "Bin", "glslc.exe")


def is_shader_file(path: str | os.PathLike) -> bool:
    """True if the path has one of the recognised shader extensions."""
    return str(path).endswith(SHADER_EXTENSIONS)


def split_string(text: str, separator: str) -> list[str]:
    """Split on every occurrence of separator; an empty separator gives []."""
    if not separator:
        return []
    return text.split(separator)


def _between_parens(line: str) -> str:
    start = line.find("(") + 1
    end = line.find(")")
    if end < start:
        return line[start:]
    return line[start:end]


def read_shader_file(path: str | os.PathLike) -> ShaderFile:
    """Read a shader, pulling the permutation defines out of its second line."""
    lines = Path(path).read_text().split("\n")
    if lines and lines[-1] == "":
        lines.pop()

    version = lines[0] if lines else ""
    second = lines[1] if len(lines) > 1 else ""

    parts = [version]
    defines: list[str] = []
    if second.startswith(PERMUTATION_MARKER):
        defines = split_string(_between_parens(second), ",")
    else:
        parts.append(second + "\n")
    parts.extend(line + "\n" for line in lines[2:])

    return ShaderFile(path=str(path), content="".join(parts), defines=defines)


def permutation_suffix(bits: int) -> str:
    """Eight-character bit string with bit 0 first, matching define order."""
    if not 0 <= bits <= 0xFF:
        raise ValueError(f"permutation bits out of range: {bits}")
    return format(bits, "08b")[::-1]


def build_command(
    shader: ShaderFile, bits: int, output_path: str, compiler: str | None = None
) -> list[str]:
    """Argument list that compiles one permutation of the shader."""
    compiler = compiler or default_compiler()
    define_args = [
        f"-D{name}" for i, name in enumerate(shader.defines) if bits & (1 << i)
    ]
    target = f"{output_path}_{permutation_suffix(bits)}.spv"
    return [compiler, TARGET_ENV, *define_args, shader.path, "-o", target]


def compile_permutation(
    shader: ShaderFile, bits: int, output_path: str, compiler: str | None = None
) -> str:
    """Compile one permutation and return everything the compiler printed."""
    cmd = build_command(shader, bits, output_path, compiler)
    try:
        result = subprocess.run(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            check=False,
        )
        output = result.stdout or ""
    except OSError as exc:
        output = f"{cmd[0]}: {exc}\n"
    print(" ".join(cmd))
    return output


def compile_permutations(
    shader: ShaderFile, base_output_path: str, compiler: str | None = None
) -> str:
    """Compile every permutation of the shader; return the combined output."""
    count = 2 ** len(shader.defines)
    if count > MAX_PERMUTATIONS:
        raise TooManyPermutationsError(shader.path, count)
    return "".join(
        compile_permutation(shader, bits, base_output_path, compiler)
        for bits in range(count)
    )


def output_base_path(shader_dir: str | os.PathLike, path: str | os.PathLike) -> str:
    """Output path prefix: the file name with its last dot removed, under spv/."""
    name = re.split(r"[\\/]", str(path))[-1]
    dot = name.rfind(".")
    if dot < 0:
        raise ValueError(f"shader file name has no extension: {name!r}")
    return f"{shader_dir}/spv/{name[:dot]}{name[dot + 1:]}"


def compile_directory(
    shader_dir: str | os.PathLike, compiler: str | None = None
) -> str:
    """Compile all shaders under shader_dir concurrently; return compiler output."""
    root = Path(shader_dir)
    if not root.is_dir():
        raise FileNotFoundError(f"shader directory not found: {shader_dir}")

    paths = sorted(
        str(p) for p in root.rglob("*") if p.is_file() and is_shader_file(p)
    )

    def compile_one(path: str) -> str:
        return compile_permutations(
            read_shader_file(path), output_base_path(shader_dir, path), compiler
        )

    with ThreadPoolExecutor() as pool:
        return "".join(pool.map(compile_one, paths))


def copy_outputs(
    shader_dir: str | os.PathLike, output_dirs: Iterable[str | os.PathLike]
) -> list[str]:
    """Copy the spv directory into each output directory; return those that worked."""
    spv = Path(shader_dir) / "spv"
    copied = []
    for out in output_dirs:
        try:
            spv.mkdir(exist_ok=True)
            shutil.copytree(spv, out, dirs_exist_ok=True)
        except OSError:
            continue
        copied.append(str(out))
    return copied


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="shader-permutations",
        description="Compile every permutation of the shaders in a directory.",
    )
    parser.add_argument(
        "shader_dir",
        nargs="?",
        default=os.path.join("Core", "res", "shaders"),
        help="directory searched recursively for shaders",
    )
    parser.add_argument(
        "-o",
        "--output-dir",
        dest="output_dirs",
        action="append",
        default=[],
        help="directory the compiled spv files are copied into (repeatable)",
    )
    parser.add_argument("--compiler", default=None, help="path of glslc")
    parser.add_argument(
        "--once", action="store_true", help="compile once instead of looping"
    )
    args = parser.parse_args(argv)

    while True:
        try:
            errors = compile_directory(args.shader_dir, args.compiler)
        except (TooManyPermutationsError, FileNotFoundError) as exc:
            print(exc)
            return 1

        copy_outputs(args.shader_dir, args.output_dirs)

        if errors:
            print("\n\n\nSOME SHADERS FAILED TO COMPILE:")
            print(errors, end="")
        else:
            print("\n\n\nALL SHADERS SUCCESSFULLY COMPILED")

        if args.once:
            return 0

        print("\n\nPRESS ANY KEY + ENTER TO CONTINUE", end="", flush=True)
        try:
            input()
        except EOFError:
            return 0