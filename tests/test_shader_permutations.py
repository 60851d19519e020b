import pytest

from snakecore.shader_permutations import (
    ShaderFile,
    TooManyPermutationsError,
    build_command,
    compile_directory,
    compile_permutation,
    compile_permutations,
    copy_outputs,
    is_shader_file,
    main,
    output_base_path,
    permutation_suffix,
    read_shader_file,
    split_string,
)


@pytest.fixture
def missing_compiler(tmp_path):
    return str(tmp_path / "no-such-glslc")


@pytest.mark.parametrize(
    "path,expected",
    [
        ("a.vert", True),
        ("a.frag", True),
        ("a.rgen", True),
        ("a.rchit", True),
        ("a.rmiss", True),
        ("dir/a.comp", True),
        ("a.glsl", False),
        ("a.spv", False),
        ("vert", False),
    ],
)
def test_is_shader_file(path, expected):
    assert is_shader_file(path) is expected


def test_split_string_basic():
    assert split_string("A,B,C", ",") == ["A", "B", "C"]


def test_split_string_empty_separator():
    assert split_string("A,B", "") == []


def test_split_string_trailing_and_empty():
    assert split_string("", ",") == [""]
    assert split_string("a::b::", "::") == ["a", "b", ""]


def test_read_shader_file_with_permutations(tmp_path):
    path = tmp_path / "lit.frag"
    path.write_text(
        "#version 460\n#define SNAKE_PERMUTATIONS(FOO,BAR)\nvoid main(){}\n"
    )
    shader = read_shader_file(path)
    assert shader.defines == ["FOO", "BAR"]
    assert shader.path == str(path)
    assert "SNAKE_PERMUTATIONS" not in shader.content
    assert shader.content.endswith("void main(){}\n")


def test_read_shader_file_without_permutations(tmp_path):
    path = tmp_path / "plain.vert"
    path.write_text("#version 460\nlayout(location=0) in vec3 p;\nvoid main(){}\n")
    shader = read_shader_file(path)
    assert shader.defines == []
    assert "layout(location=0) in vec3 p;" in shader.content


def test_permutation_suffix_bit_order():
    assert permutation_suffix(1) == "10000000"
    assert permutation_suffix(0) == "0" * 8


@pytest.mark.parametrize("bits", [-1, 256])
def test_permutation_suffix_out_of_range(bits):
    with pytest.raises(ValueError):
        permutation_suffix(bits)


def test_build_command_selects_active_defines():
    shader = ShaderFile(path="s.frag", defines=["A", "B"])
    cmd = build_command(shader, 0b10, "out/base", "glslc")
    assert cmd[0] == "glslc"
    assert "--target-env=vulkan1.3" in cmd
    assert "-DB" in cmd
    assert "-DA" not in cmd
    assert "s.frag" in cmd
    assert cmd[-2] == "-o"
    assert cmd[-1] == f"out/base_{permutation_suffix(0b10)}.spv"


def test_compile_permutations_limit():
    shader = ShaderFile(path="big.comp", defines=[f"D{i}" for i in range(8)])
    with pytest.raises(TooManyPermutationsError) as info:
        compile_permutations(shader, "out/big", "glslc")
    assert info.value.count == 256
    assert "big.comp" in str(info.value)


def test_compile_permutation_reports_missing_compiler(missing_compiler, capsys):
    shader = ShaderFile(path="s.vert")
    output = compile_permutation(shader, 0, "out/s", missing_compiler)
    assert missing_compiler in output
    assert missing_compiler in capsys.readouterr().out


def test_output_base_path_removes_last_dot():
    assert output_base_path("dir", "a/b/shader.vert") == "dir/spv/shadervert"
    assert output_base_path("dir", "c:\\x\\lit.frag") == output_base_path(
        "dir", "lit.frag"
    )


def test_output_base_path_without_extension():
    with pytest.raises(ValueError):
        output_base_path("dir", "shader")


def test_compile_directory_missing_dir(tmp_path):
    with pytest.raises(FileNotFoundError):
        compile_directory(tmp_path / "missing", "glslc")


def test_copy_outputs(tmp_path):
    shader_dir = tmp_path / "shaders"
    (shader_dir / "spv").mkdir(parents=True)
    (shader_dir / "spv" / "a_00000000.spv").write_bytes(b"spv")
    blocker = tmp_path / "blocker"
    blocker.write_text("a file, not a directory")
    out1 = tmp_path / "out1"
    out2 = tmp_path / "out2"
    copied = copy_outputs(shader_dir, [out1, blocker, out2])
    assert copied == [str(out1), str(out2)]
    assert (out1 / "a_00000000.spv").read_bytes() == b"spv"
    assert (out2 / "a_00000000.spv").read_bytes() == b"spv"


def test_copy_outputs_creates_spv_dir(tmp_path):
    shader_dir = tmp_path / "shaders"
    shader_dir.mkdir()
    copied = copy_outputs(shader_dir, [tmp_path / "out"])
    assert (shader_dir / "spv").is_dir()
    assert copied == [str(tmp_path / "out")]


def test_main_reports_failures(tmp_path, missing_compiler, capsys):
    (tmp_path / "a.vert").write_text("#version 460\nvoid main(){}\n")
    code = main([str(tmp_path), "--compiler", missing_compiler, "--once"])
    assert code == 0
    assert "SOME SHADERS FAILED TO COMPILE" in capsys.readouterr().out


def test_main_success_when_nothing_to_compile(tmp_path, capsys):
    code = main([str(tmp_path), "--once"])
    assert code == 0
    assert "ALL SHADERS SUCCESSFULLY COMPILED" in capsys.readouterr().out


def test_main_too_many_permutations(tmp_path, capsys):
    defines = ",".join(f"D{i}" for i in range(8))
    (tmp_path / "a.comp").write_text(
        f"#version 460\n#define SNAKE_PERMUTATIONS({defines})\n"
    )
    code = main([str(tmp_path), "--compiler", "glslc", "--once"])
    assert code == 1
    assert "num_unique_permutations=256" in capsys.readouterr().out