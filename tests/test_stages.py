from textwrap import dedent

import pytest

from jenkinsweave.errors import InvalidStepError, StageContainerNotFoundError, StageIndexError
from jenkinsweave.model import STATEMENT
from jenkinsweave.parser import parse
from jenkinsweave.serializer import render
from jenkinsweave.stages import find_stage_index, insert_stage, stage_names

THREE_STAGES = dedent("""\
    pipeline {
        agent any
        stages {
            stage('Build'){
                steps{
                    echo 'Building..'
                }
            }
            stage('Test'){
                steps{
                    echo 'Testing..'
                }
            }
            stage('Old'){
                steps{
                    oldFunction()
                }
            }
        }
    }
""")


def test_find_stage_index():
    pipeline = parse(THREE_STAGES)
    assert find_stage_index(pipeline, "Building") == 0
    assert find_stage_index(pipeline, "Testing..") == 1
    assert find_stage_index(pipeline, "oldFunction()") == 2
    assert find_stage_index(pipeline, "echo") == 0
    assert find_stage_index(pipeline, "deploy") == -1


def test_find_stage_index_without_pipeline_or_stages():
    assert find_stage_index(parse("node {\nstages {\n}\n}"), "x") == -1
    assert find_stage_index(parse("pipeline {\nagent any\n}"), "agent") == -1
    assert find_stage_index(parse(""), "") == -1


def test_find_ignores_steps_outside_steps_block():
    text = "pipeline {\nstages {\nstage('A') {\nwhen {\nbranch 'main'\n}\n}\n}\n}"
    assert find_stage_index(parse(text), "branch") == -1


def test_insert_before_old_stage():
    pipeline = parse(THREE_STAGES)
    insert_stage(pipeline, "New", ["newFunction()"], find_stage_index(pipeline, "oldFunction()"))
    assert render(pipeline) == dedent("""\
        pipeline {
            agent any
            stages {
                stage('Build') {
                    steps {
                        echo 'Building..'
                    }
                }
                stage('Test') {
                    steps {
                        echo 'Testing..'
                    }
                }
                stage('New') {
                    steps {
                        newFunction()
                    }
                }
                stage('Old') {
                    steps {
                        oldFunction()
                    }
                }
            }
        }
    """)


def test_insert_preserves_order_and_identity():
    pipeline = parse(THREE_STAGES)
    stages = pipeline.elements[0].children[1]
    before = list(stages.children)

    new = insert_stage(pipeline, "Lint", ["sh 'flake8'", "echo linted"], 1)

    after = stages.children
    assert after is not before
    assert len(after) == len(before) + 1
    assert after[0] is before[0]
    assert after[1] is new
    assert after[2] is before[1] and after[3] is before[2]

    assert new.name == "stage('Lint')"
    (steps,) = new.children
    assert steps.name == "steps" and steps.has_braces
    assert [s.name for s in steps.children] == ["sh 'flake8'", "echo linted"]
    assert all(s.kind == STATEMENT for s in steps.children)


def test_insert_at_both_ends():
    pipeline = parse(THREE_STAGES)
    insert_stage(pipeline, "First", [], 0)
    insert_stage(pipeline, "Last", ["echo bye"], 4)
    assert stage_names(pipeline) == [
        "stage('First')", "stage('Build')", "stage('Test')", "stage('Old')", "stage('Last')",
    ]
    assert find_stage_index(pipeline, "bye") == 4


def test_inserted_stage_is_searchable():
    pipeline = parse(THREE_STAGES)
    insert_stage(pipeline, "New", ["newFunction()"], 2)
    assert find_stage_index(pipeline, "newFunction") == 2
    assert find_stage_index(pipeline, "oldFunction") == 3


@pytest.mark.parametrize("index", [-1, 4, 100])
def test_insert_out_of_range(index):
    pipeline = parse(THREE_STAGES)
    with pytest.raises(StageIndexError) as ex:
        insert_stage(pipeline, "X", ["x"], index)
    assert isinstance(ex.value, IndexError)
    assert ex.value.count == 3
    assert len(stage_names(pipeline)) == 3


def test_insert_without_stages_container():
    with pytest.raises(StageContainerNotFoundError):
        insert_stage(parse("pipeline {\nagent any\n}"), "X", [], 0)
    with pytest.raises(StageContainerNotFoundError):
        insert_stage(parse(""), "X", [], 0)


def test_insert_into_empty_stages_round_trips():
    pipeline = parse("pipeline {\nstages {\n}\n}")
    insert_stage(pipeline, "Only", ["echo only"], 0)
    text = render(pipeline)
    assert render(parse(text)) == text
    assert stage_names(parse(text)) == ["stage('Only')"]


@pytest.mark.parametrize("step", ["}", "dir('sub') {", "sh '''", "echo a\necho b", "   "])
def test_insert_rejects_steps_that_do_not_read_back(step):
    pipeline = parse(THREE_STAGES)
    before = render(pipeline)
    with pytest.raises(InvalidStepError) as ex:
        insert_stage(pipeline, "X", ["echo ok", step], 1)
    assert ex.value.step == step
    assert render(pipeline) == before


def test_inserted_steps_are_trimmed_and_round_trip():
    pipeline = parse(THREE_STAGES)
    insert_stage(pipeline, "X", ["  echo padded  ", "sh '''echo one-liner'''"], 0)
    text = render(pipeline)
    assert "                echo padded\n" in text
    assert render(parse(text)) == text
    assert find_stage_index(parse(text), "one-liner") == 0
