import pytest

from matrixmail.config import Configuration

SAMPLE = """
pull_time: 60
imap_server:
  host: imap.example.com
  user: bot@example.com
matrix_client:
  protocol: https
  server: matrix.example.com
  token: token
  email_room: "!mail"
  chat_room: "!chat"
  sender: bot
  timeout: 30
openai_client:
  protocol: https
  server: openai.example.com
  api_key: placeholder
  model: model
  temperature: 0.5
  prompts:
    asistente:
      prompt: Eres un asistente
      messages:
        - role: user
          content: hola
"""


def test_from_yaml_reads_all_sections():
    config = Configuration.from_yaml(SAMPLE)
    assert config.pull_time == 60
    assert config.imap_server["host"] == "imap.example.com"
    assert config.matrix_client.chat_room == "!chat"
    assert config.matrix_client.since is None
    assert config.openai_client.temperature == 0.5
    assert config.openai_client.prompts["asistente"].messages[0].content == "hola"


def test_save_then_read_round_trips(tmp_path):
    path = tmp_path / "config.yml"
    config = Configuration.from_yaml(SAMPLE)
    config.matrix_client.since = "batch"
    config.save(path)
    loaded = Configuration.read(path)
    assert loaded == config
    assert loaded.matrix_client.since == "batch"


def test_to_dict_has_top_level_keys():
    data = Configuration.from_yaml(SAMPLE).to_dict()
    assert set(data) == {"pull_time", "imap_server", "matrix_client", "openai_client"}
    assert Configuration.from_yaml(SAMPLE).to_dict() == data


def test_missing_section_is_rejected():
    content = SAMPLE.replace("pull_time: 60\n", "")
    with pytest.raises(ValueError):
        Configuration.from_yaml(content)


def test_pull_time_out_of_range_is_rejected():
    with pytest.raises(ValueError):
        Configuration.from_yaml(SAMPLE.replace("pull_time: 60", "pull_time: 70000"))


def test_invalid_yaml_is_rejected():
    with pytest.raises(ValueError):
        Configuration.from_yaml("pull_time: [unclosed")


def test_non_mapping_is_rejected():
    with pytest.raises(ValueError):
        Configuration.from_yaml("- a\n- b\n")


def test_read_missing_file_raises(tmp_path):
    with pytest.raises(OSError):
        Configuration.read(tmp_path / "absent.yml")