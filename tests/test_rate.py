from types import SimpleNamespace

import pytest

from netproc.rate import SAMPLE_SPACE_SIZE, NetStat, RateCounter


def _process(n_connections=0):
    return SimpleNamespace(
        net_stat=NetStat(),
        connections=[SimpleNamespace(net_stat=NetStat()) for _ in range(n_connections)],
    )


def _fill_every_second(counter, proc, length):
    for second in range(SAMPLE_SPACE_SIZE):
        if second:
            counter.update([proc], True)
        counter.add_rx(proc.net_stat, length)
        counter.add_tx(proc.net_stat, length)


def test_add_rx_counts_in_current_slot():
    counter = RateCounter()
    stat = NetStat()
    counter.add_rx(stat, 1500)
    assert stat.packets_rx[counter.index] == 1
    assert stat.bytes_rx[counter.index] == 1500
    assert stat.bytes_last_sec_rx == 1500
    assert stat.total_bytes_rx == 1500
    assert sum(stat.packets_tx) == 0


def test_add_tx_counts_in_current_slot():
    counter = RateCounter()
    stat = NetStat()
    counter.add_tx(stat, 40)
    counter.add_tx(stat, 60)
    assert stat.packets_tx[counter.index] == 2
    assert stat.bytes_tx[counter.index] == 40 + 60
    assert stat.total_bytes_tx == 40 + 60
    assert stat.total_bytes_rx == 0


def test_negative_length_raises():
    with pytest.raises(ValueError):
        RateCounter().add_rx(NetStat(), -1)


def test_average_of_constant_rate_in_bytes():
    counter = RateCounter()
    proc = _process()
    _fill_every_second(counter, proc, 500)
    counter.calc([proc], True, False)
    assert proc.net_stat.avg_bytes_rx == 500
    assert proc.net_stat.avg_bytes_tx == 500
    assert proc.net_stat.avg_packets_rx == 1


def test_average_of_constant_rate_in_bits():
    counter = RateCounter()
    proc = _process()
    _fill_every_second(counter, proc, 500)
    counter.calc([proc], False, False)
    assert proc.net_stat.avg_bytes_rx == 8 * 500
    assert proc.net_stat.avg_packets_tx == 1


def test_average_rounds_to_nearest():
    counter = RateCounter()
    low, high = _process(), _process()
    counter.add_rx(low.net_stat, 2)
    counter.add_rx(high.net_stat, 3)
    counter.calc([low, high], True, False)
    assert low.net_stat.avg_bytes_rx == 0
    assert high.net_stat.avg_bytes_rx == 1


def test_update_wraps_around_sample_space():
    counter = RateCounter()
    for _ in range(SAMPLE_SPACE_SIZE):
        counter.update([], False)
    assert counter.index == 0


def test_update_clears_new_slot_but_keeps_totals():
    counter = RateCounter()
    proc = _process()
    counter.add_rx(proc.net_stat, 700)
    counter.update([proc], False)
    assert proc.net_stat.bytes_last_sec_rx == 0
    assert proc.net_stat.bytes_rx[0] == 700
    for _ in range(SAMPLE_SPACE_SIZE - 1):
        counter.update([proc], False)
    assert proc.net_stat.bytes_rx == [0] * SAMPLE_SPACE_SIZE
    assert proc.net_stat.packets_rx == [0] * SAMPLE_SPACE_SIZE
    assert proc.net_stat.total_bytes_rx == 700


def test_samples_go_to_slot_after_update():
    counter = RateCounter()
    stat = NetStat()
    counter.update([], False)
    counter.add_rx(stat, 10)
    assert stat.bytes_rx[0] == 0
    assert stat.bytes_rx[counter.index] == 10


def test_connections_follow_view_connections_flag():
    counter = RateCounter()
    proc = _process(1)
    conn = proc.connections[0].net_stat
    for second in range(SAMPLE_SPACE_SIZE):
        if second:
            counter.update([proc], False)
        counter.add_rx(conn, 200)
    counter.calc([proc], True, False)
    assert conn.avg_bytes_rx == 0
    counter.calc([proc], True, True)
    assert conn.avg_bytes_rx == 200
    counter.update([proc], False)
    assert sum(conn.bytes_rx) == SAMPLE_SPACE_SIZE * 200


def test_update_clears_connection_slot_but_not_last_second():
    counter = RateCounter()
    proc = _process(1)
    conn = proc.connections[0].net_stat
    counter.add_rx(conn, 300)
    for _ in range(SAMPLE_SPACE_SIZE):
        counter.update([proc], True)
    assert conn.bytes_rx == [0] * SAMPLE_SPACE_SIZE
    assert conn.bytes_last_sec_rx == 300