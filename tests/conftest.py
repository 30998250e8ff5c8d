"""Pytest configuration and fixtures.

Provides shared Liberty content/files and the CLI runner used across multiple tests.
"""

import gzip
import textwrap

import pytest
from typer.testing import CliRunner


@pytest.fixture
def sample_liberty_content():
    """Provides a sample Liberty file content as a string.

    Contains:
    - A leading file comment (dropped at top level).
    - Library header (units, operating conditions, a body comment).
    - Lookup table template (3x3).
    - Cells:
        - AND2: combinational cell with a timing arc and multi-line values.
        - DFF_X1: sequential cell with an ff group and a clock pin.
    """
    return textwrap.dedent("""
    /*
     delay model :       typ
     check model :       typ
    */
    library(sample) {
      delay_model : table_lookup;
      /* unit attributes */
      time_unit : "1ns";
      capacitive_load_unit (1, pf);
      slew_upper_threshold_pct_rise : 80;
      nom_temperature : 25.0;
      nom_voltage : 1.2;
      in_place_swap_mode : match_footprint;

      lu_table_template(delay_temp_3x3) {
        variable_1 : input_net_transition;
        variable_2 : total_output_net_capacitance;
        index_1 ("0.5, 1.0, 1.5");
        index_2 ("10.0, 20.0, 30.0");
      }

      cell(AND2) {
        area : 1;
        dont_use : false;
        pin(a) {
          direction : input;
          capacitance : 0.002;
        }
        pin(b) {
          direction : input;
          capacitance : 0.0021;
        }
        pin(o) {
          direction : output;
          function : "a & b";
          timing() {
            related_pin : "a";
            timing_sense : positive_unate;
            cell_rise(delay_temp_3x3) {
              index_1 ("0.5, 1.0, 1.5");
              index_2 ("10.0, 20.0, 30.0");
              values ( "0.1, 0.2, 0.3", \\
                       "0.11, 0.21, 0.31", \\
                       "0.12, 0.22, 0.32" );
            }
          }
        }
      }

      cell(DFF_X1) {
        area : 4.5;
        ff(IQ, IQN) {
          next_state : "D";
          clocked_on : "CK";
        }
        pin(CK) {
          direction : input;
          clock : true;
        }
      }
    }
    """)


@pytest.fixture
def sample_liberty_file(tmp_path, sample_liberty_content):
    """Writes the sample Liberty content to a temporary .lib file."""
    path = tmp_path / "sample.lib"
    path.write_text(sample_liberty_content, encoding="utf-8")
    return path


@pytest.fixture
def sample_liberty_gz_file(tmp_path, sample_liberty_content):
    """Writes the sample Liberty content to a temporary gzip-compressed file."""
    path = tmp_path / "sample.lib.gz"
    with gzip.open(path, "wt", encoding="utf-8") as f:
        f.write(sample_liberty_content)
    return path


@pytest.fixture
def runner():
    """Provides a Typer CLI runner."""
    return CliRunner()
