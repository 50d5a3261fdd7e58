"""Tests for the main simulator."""

import heapq
import itertools
import math
import unittest
from collections import deque

from queuesim.core.simulator import Simulator
from queuesim.core.event_queue import Event, EventType, EventQueue, EmptyQueueError
from queuesim.core.random_source import LinearCongruentialGenerator
from queuesim.models.stage_config import InvalidConfigurationError

RANDOM = {
    'multiplier': 16807,
    'increment': 0,
    'modulus': 2147483647,
    'seed': 12345,
}


def stage(name, servers, capacity, arrival_range, service_range):
    return {
        'name': name,
        'servers': servers,
        'capacity': capacity,
        'arrival_range': list(arrival_range),
        'service_range': list(service_range),
    }


class TestSimulator(unittest.TestCase):
    """Test cases for Simulator class."""

    def setUp(self):
        """Set up test fixtures."""
        self.scenario_a = {
            'name': 'scenario A',
            'simulation': {'draw_budget': 100000},
            'random': dict(RANDOM),
            'stages': [stage('queue', 1, 5, (2, 5), (3, 5))],
            'metrics': {'record_trace': True},
        }
        self.scenario_b = {
            'name': 'scenario B',
            'simulation': {'draw_budget': 100000},
            'random': dict(RANDOM),
            'stages': [
                stage('stage1', 2, 3, (1, 4), (3, 4)),
                stage('stage2', 2, 3, (0, 0), (3, 4)),
            ],
            'metrics': {'record_trace': True},
        }

    def test_simulator_initialization(self):
        """Test simulator initialization."""
        simulator = Simulator(self.scenario_a)

        self.assertEqual(simulator.mode, 'single')
        self.assertEqual(simulator.draw_budget, 100000)
        self.assertEqual(len(simulator.stages), 1)
        self.assertEqual(simulator.current_time, 0.0)
        self.assertTrue(simulator.event_queue.is_empty())

        self.assertEqual(Simulator(self.scenario_b).mode, 'tandem')

    def test_scenario_a(self):
        """Single G/G/1/5 stage terminates with a normalized distribution."""
        results = Simulator(self.scenario_a).run()
        queue = results['stages'][0]

        self.assertEqual(len(queue['states']), 6)
        total = sum(entry['probability'] for entry in queue['states'])
        self.assertAlmostEqual(total, 1.0, delta=1e-9)
        self.assertGreater(queue['completed_count'], 0)
        self.assertGreater(results['total_time'], 0)
        self.assertGreaterEqual(results['draws_used'], 100000)

    def test_scenario_b(self):
        """Tandem run terminates with a sane downstream response time."""
        results = Simulator(self.scenario_b).run()
        stage2 = results['stages'][1]

        self.assertEqual(results['mode'], 'tandem')
        self.assertGreater(stage2['completed_count'], 0)
        self.assertTrue(math.isfinite(stage2['mean_response_time']))
        self.assertGreaterEqual(stage2['mean_response_time'], 3.0)

    def test_determinism(self):
        """Identical configuration gives identical results."""
        for config in (self.scenario_a, self.scenario_b):
            first = Simulator(config).run()
            second = Simulator(config).run()
            self.assertEqual(first, second)

    def test_histogram_conservation(self):
        """Every stage's histogram adds up to the network clock."""
        for config in (self.scenario_a, self.scenario_b):
            simulator = Simulator(config)
            results = simulator.run()
            for stage_obj in simulator.stages:
                self.assertTrue(math.isclose(
                    float(stage_obj.state_time.sum()), results['total_time'],
                    rel_tol=1e-9,
                ))

    def test_occupancy_bound(self):
        """Occupancy never leaves [0, capacity] at any processed event."""
        for config in (self.scenario_a, self.scenario_b):
            results = Simulator(config).run()
            capacities = [s['capacity'] for s in results['stages']]
            self.assertEqual(len(results['trace']), results['events_processed'])

            previous_time = 0.0
            for time, _, occupancy in results['trace']:
                self.assertGreaterEqual(time, previous_time)
                previous_time = time
                for customers, capacity in zip(occupancy, capacities):
                    self.assertGreaterEqual(customers, 0)
                    self.assertLessEqual(customers, capacity)

    def test_loss_accounting(self):
        """Every arrival is either admitted or counted as lost exactly once."""
        results = Simulator(self.scenario_a).run()
        queue = results['stages'][0]
        arrivals = sum(1 for _, kind, _ in results['trace'] if kind == 'arrival')

        self.assertGreater(queue['loss_count'], 0)
        self.assertEqual(queue['admitted_count'] + queue['loss_count'], arrivals)

    def test_tandem_flow_conservation(self):
        """Every stage 1 completion is offered to stage 2 exactly once."""
        results = Simulator(self.scenario_b).run()
        stage1, stage2 = results['stages']
        passages = sum(1 for _, kind, _ in results['trace'] if kind == 'passage')

        self.assertEqual(stage2['admitted_count'] + stage2['loss_count'],
                         stage1['completed_count'])
        self.assertEqual(passages, stage1['completed_count'])
        self.assertEqual(stage1['loss_count'] + stage1['admitted_count'],
                         sum(1 for _, kind, _ in results['trace'] if kind == 'arrival'))

    def test_fixed_interval_single_stage(self):
        """Hand-traced G/G/1/1 run with constant arrival and service times."""
        config = {
            'simulation': {'draw_budget': 10},
            'random': dict(RANDOM),
            'stages': [stage('queue', 1, 1, (1, 1), (3, 3))],
        }
        results = Simulator(config).run()
        queue = results['stages'][0]

        self.assertEqual(results['total_time'], 7.0)
        self.assertEqual(results['events_processed'], 9)
        self.assertEqual(results['draws_used'], 11)
        self.assertEqual(results['draw_budget_remaining'], 0)
        self.assertEqual(queue['loss_count'], 4)
        self.assertEqual(queue['admitted_count'], 3)
        self.assertEqual(queue['completed_count'], 2)
        self.assertEqual(queue['mean_response_time'], 3.0)
        self.assertEqual([e['time'] for e in queue['states']], [1.0, 6.0])
        self.assertAlmostEqual(queue['states'][1]['probability'], 6.0 / 7.0)

    def test_fixed_interval_tandem(self):
        """Hand-traced tandem run where stage 2 loses a customer."""
        config = {
            'simulation': {'draw_budget': 8},
            'random': dict(RANDOM),
            'stages': [
                stage('stage1', 1, 1, (2, 2), (1, 1)),
                stage('stage2', 1, 1, (0, 0), (3, 3)),
            ],
        }
        results = Simulator(config).run()
        stage1, stage2 = results['stages']

        self.assertEqual(results['total_time'], 6.0)
        self.assertEqual(results['events_processed'], 6)
        self.assertEqual(stage1['completed_count'], 2)
        self.assertEqual(stage1['loss_count'], 0)
        self.assertEqual(stage2['admitted_count'], 1)
        self.assertEqual(stage2['loss_count'], 1)
        self.assertEqual(stage2['completed_count'], 1)
        self.assertEqual(stage2['mean_response_time'], 3.0)
        self.assertEqual([e['time'] for e in stage1['states']], [4.0, 2.0])
        self.assertEqual([e['time'] for e in stage2['states']], [3.0, 3.0])

    def test_zero_budget(self):
        """A zero budget simulates nothing and reports zeros."""
        self.scenario_a['simulation']['draw_budget'] = 0
        results = Simulator(self.scenario_a).run()
        queue = results['stages'][0]

        self.assertEqual(results['total_time'], 0.0)
        self.assertEqual(results['events_processed'], 0)
        self.assertEqual(queue['mean_response_time'], 0.0)
        self.assertTrue(all(e['probability'] == 0.0 for e in queue['states']))

    def test_explicit_generator(self):
        """A caller-supplied generator is used instead of the config section."""
        rng = LinearCongruentialGenerator(seed=12345)
        shared = Simulator(self.scenario_a, rng=rng).run()
        fresh = Simulator(self.scenario_a).run()

        self.assertEqual(shared, fresh)
        self.assertNotEqual(rng.state, 12345)

    def test_run_only_once(self):
        simulator = Simulator(self.scenario_a)
        simulator.run()
        with self.assertRaises(RuntimeError):
            simulator.run()

    def test_invalid_topology(self):
        """Three stages, or an upstream stage without arrivals, are rejected."""
        config = dict(self.scenario_b)
        config['stages'] = self.scenario_b['stages'] + [stage('stage3', 1, 1, (0, 0), (1, 2))]
        with self.assertRaises(InvalidConfigurationError):
            Simulator(config)

        config['stages'] = [stage('stage1', 1, 1, (0, 0), (1, 2))]
        with self.assertRaises(ValueError):
            Simulator(config)


def replay_single_stage(servers, capacity, arrival_range, service_range, budget, seed):
    """Event-by-event replay of one G/G/c/K stage, drawing service before arrival."""
    rng = LinearCongruentialGenerator(seed=seed)
    remaining = budget

    def draw(low, high):
        nonlocal remaining
        remaining -= 1
        return rng.uniform(low, high)

    agenda = []
    counter = itertools.count()
    now = last = 0.0
    in_system = busy = lost = completed = 0
    response = 0.0
    state_time = [0.0] * (capacity + 1)
    admitted = deque()

    heapq.heappush(agenda, (draw(*arrival_range), next(counter), 'arrival'))
    while agenda and remaining > 0:
        time, _, kind = heapq.heappop(agenda)
        state_time[min(in_system, capacity)] += time - last
        now = last = time

        if kind == 'arrival':
            if in_system >= capacity:
                lost += 1
            else:
                in_system += 1
                admitted.append(now)
                if busy < servers:
                    busy += 1
                    heapq.heappush(agenda, (now + draw(*service_range), next(counter), 'departure'))
            heapq.heappush(agenda, (now + draw(*arrival_range), next(counter), 'arrival'))
        else:
            in_system -= 1
            response += now - admitted.popleft()
            completed += 1
            if in_system >= busy:
                heapq.heappush(agenda, (now + draw(*service_range), next(counter), 'departure'))
            else:
                busy -= 1

    return {
        'total_time': last,
        'state_time': state_time,
        'loss_count': lost,
        'completed_count': completed,
        'response_time_sum': response,
    }


class TestDrawOrder(unittest.TestCase):
    """Seeded runs follow the established draw order: service, then next arrival."""

    def config(self, servers, budget):
        return {
            'name': f"G/G/{servers}/5",
            'simulation': {'draw_budget': budget},
            'random': dict(RANDOM),
            'stages': [stage('queue', servers, 5, (2, 5), (3, 5))],
            'metrics': {'record_trace': True},
        }

    def test_first_events(self):
        """The first admission draws its service time before the next arrival."""
        rng = LinearCongruentialGenerator(seed=12345)
        first_arrival = rng.uniform(2.0, 5.0)
        first_departure = first_arrival + rng.uniform(3.0, 5.0)
        second_arrival = first_arrival + rng.uniform(2.0, 5.0)

        results = Simulator(self.config(1, 5)).run()
        trace = results['trace']

        self.assertEqual(trace[0][:2], (first_arrival, 'arrival'))
        # With seed 12345 the first service ends before the second customer arrives
        self.assertLess(first_departure, second_arrival)
        self.assertEqual(trace[1][:2], (first_departure, 'departure'))
        self.assertEqual(trace[2][:2], (second_arrival, 'arrival'))

    def test_matches_event_by_event_replay(self):
        """Full single-stage runs reproduce an independent replay of the loop."""
        for servers in (1, 2):
            with self.subTest(servers=servers):
                simulator = Simulator(self.config(servers, 100000))
                results = simulator.run()
                queue = results['stages'][0]
                expected = replay_single_stage(servers, 5, (2.0, 5.0), (3.0, 5.0),
                                               100000, 12345)

                self.assertEqual(results['total_time'], expected['total_time'])
                self.assertEqual(queue['completed_count'], expected['completed_count'])
                self.assertEqual(queue['loss_count'], expected['loss_count'])
                self.assertTrue(math.isclose(simulator.stages[0].response_time_sum,
                                             expected['response_time_sum'], rel_tol=1e-12))
                for actual, reference in zip(queue['states'], expected['state_time']):
                    self.assertTrue(math.isclose(actual['time'], reference,
                                                 rel_tol=1e-12, abs_tol=1e-12))


class TestEventQueue(unittest.TestCase):
    """Test cases for EventQueue."""

    def test_empty_queue(self):
        """Test empty queue behavior."""
        queue = EventQueue()

        self.assertTrue(queue.is_empty())
        self.assertEqual(queue.size(), 0)
        self.assertIsNone(queue.peek())
        with self.assertRaises(EmptyQueueError):
            queue.pop()

    def test_event_queue_ordering(self):
        """Test event queue maintains correct order."""
        queue = EventQueue()

        # Add events in random order
        queue.push(Event(time=3.0, event_type=EventType.ARRIVAL))
        queue.push(Event(time=1.0, event_type=EventType.ARRIVAL))
        queue.push(Event(time=2.0, event_type=EventType.DEPARTURE))

        self.assertEqual([queue.pop().time for _ in range(3)], [1.0, 2.0, 3.0])
        self.assertTrue(queue.is_empty())

    def test_insertion_order_tie_break(self):
        """Events at the same time come out in the order they were scheduled."""
        queue = EventQueue()

        queue.schedule(1.0, EventType.DEPARTURE)
        queue.schedule(1.0, EventType.ARRIVAL)
        queue.schedule(0.5, EventType.PASSAGE)
        queue.schedule(1.0, EventType.PASSAGE)

        kinds = [queue.pop().event_type for _ in range(4)]
        self.assertEqual(kinds, [
            EventType.PASSAGE,
            EventType.DEPARTURE,
            EventType.ARRIVAL,
            EventType.PASSAGE,
        ])

    def test_clear(self):
        queue = EventQueue()
        queue.schedule(1.0, EventType.ARRIVAL)
        queue.schedule(2.0, EventType.ARRIVAL)

        self.assertEqual(len(queue), 2)
        queue.clear()
        self.assertTrue(queue.is_empty())


if __name__ == '__main__':
    unittest.main()
