"""
Unit tests for the Coordinator
Tests construction, task hand-out priority, completion tracking and reduce task generation
"""

import os
import sys
import threading
import unittest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from common.errors import InvalidArgument, InvalidConfiguration, InvalidTaskId
from common.task import TaskType
from coordinator.job_manager import Coordinator, JobPhase


def drain_map_tasks(coordinator):
    tasks = []
    while True:
        task = coordinator.get_task()
        if task.task_type != TaskType.MAP:
            return tasks, task
        tasks.append(task)


class TestCoordinatorConstruction(unittest.TestCase):
    """Constructor validation and map task seeding"""

    def test_rejects_missing_input_files(self):
        with self.assertRaises(InvalidConfiguration):
            Coordinator(None, 2)

    def test_rejects_non_positive_reduce_count(self):
        with self.assertRaises(InvalidConfiguration):
            Coordinator(["a.txt"], 0)
        with self.assertRaises(InvalidConfiguration):
            Coordinator(["a.txt"], -3)

    def test_map_tasks_follow_input_order(self):
        coordinator = Coordinator(["a.txt", "b.txt", "c.txt"], 3)

        tasks, _ = drain_map_tasks(coordinator)

        self.assertEqual([t.task_id for t in tasks], [0, 1, 2])
        self.assertEqual([t.source_file for t in tasks], ["a.txt", "b.txt", "c.txt"])
        self.assertTrue(all(t.num_partitions == 3 for t in tasks))
        print("✓ Map task seeding test passed")

    def test_empty_input_goes_straight_to_reduce(self):
        coordinator = Coordinator([], 2)

        self.assertTrue(coordinator.is_map_phase_done())
        first = coordinator.get_task()
        second = coordinator.get_task()
        self.assertEqual(first.task_type, TaskType.REDUCE)
        self.assertEqual(second.task_type, TaskType.REDUCE)
        self.assertEqual(first.input_files, ())

        coordinator.complete_reduce_task(first.task_id)
        coordinator.complete_reduce_task(second.task_id)
        self.assertEqual(coordinator.get_task().task_type, TaskType.EXIT)


class TestCoordinatorTaskPriority(unittest.TestCase):
    """get_task ordering across the phases"""

    def setUp(self):
        self.coordinator = Coordinator(["a.txt", "b.txt"], 2)

    def test_waits_while_map_tasks_in_flight(self):
        tasks, next_task = drain_map_tasks(self.coordinator)

        self.assertEqual(len(tasks), 2)
        self.assertEqual(next_task.task_type, TaskType.WAIT)
        self.assertFalse(self.coordinator.is_map_phase_done())

    def test_no_reduce_task_before_map_phase_done(self):
        tasks, _ = drain_map_tasks(self.coordinator)
        self.coordinator.complete_map_task(tasks[0].task_id, ["medium/mr-0-0.txt"])

        for _ in range(5):
            task = self.coordinator.get_task()
            self.assertNotEqual(task.task_type, TaskType.REDUCE)

        self.coordinator.complete_map_task(tasks[1].task_id, ["medium/mr-1-1.txt"])
        self.assertTrue(self.coordinator.is_map_phase_done())
        self.assertEqual(self.coordinator.get_task().task_type, TaskType.REDUCE)

    def test_full_lifecycle_ends_with_exit(self):
        tasks, _ = drain_map_tasks(self.coordinator)
        for task in tasks:
            self.coordinator.complete_map_task(task.task_id, [])

        reduce_tasks = [self.coordinator.get_task(), self.coordinator.get_task()]
        self.assertEqual([t.task_id for t in reduce_tasks], [0, 1])
        self.assertEqual(self.coordinator.get_task().task_type, TaskType.WAIT)

        self.coordinator.complete_reduce_task(0)
        self.assertFalse(self.coordinator.is_reduce_phase_done())
        self.coordinator.complete_reduce_task(1)

        self.assertTrue(self.coordinator.is_reduce_phase_done())
        self.assertEqual(self.coordinator.get_task().task_type, TaskType.EXIT)
        print("✓ Coordinator lifecycle test passed")


class TestCoordinatorCompletion(unittest.TestCase):
    """Completion calls: validation and idempotence"""

    def setUp(self):
        self.coordinator = Coordinator(["a.txt", "b.txt"], 2)
        drain_map_tasks(self.coordinator)

    def test_map_task_id_out_of_range(self):
        with self.assertRaises(InvalidTaskId):
            self.coordinator.complete_map_task(2, [])
        with self.assertRaises(InvalidTaskId):
            self.coordinator.complete_map_task(-1, [])

    def test_map_outputs_required(self):
        with self.assertRaises(InvalidArgument):
            self.coordinator.complete_map_task(0, None)

    def test_reduce_task_id_out_of_range(self):
        with self.assertRaises(InvalidTaskId):
            self.coordinator.complete_reduce_task(2)

    def test_duplicate_map_completion_counted_once(self):
        self.coordinator.complete_map_task(0, ["medium/mr-0-0.txt"])
        self.coordinator.complete_map_task(0, ["medium/mr-0-1.txt"])

        self.assertEqual(self.coordinator.map_tasks_completed, 1)
        self.assertEqual(self.coordinator.map_outputs[0], ("medium/mr-0-0.txt",))
        self.assertFalse(self.coordinator.is_map_phase_done())

    def test_duplicate_reduce_completion_counted_once(self):
        self.coordinator.complete_map_task(0, [])
        self.coordinator.complete_map_task(1, [])
        self.coordinator.get_task()

        self.coordinator.complete_reduce_task(0)
        self.coordinator.complete_reduce_task(0)

        self.assertEqual(self.coordinator.reduce_tasks_completed, 1)
        self.assertFalse(self.coordinator.is_reduce_phase_done())


class TestReduceTaskGeneration(unittest.TestCase):
    """Grouping of map outputs into reduce tasks"""

    def test_groups_files_by_partition_in_map_task_order(self):
        coordinator = Coordinator(["a.txt", "b.txt"], 3)
        drain_map_tasks(coordinator)

        coordinator.complete_map_task(1, ["medium/mr-1-0.txt", "medium/mr-1-2.txt"])
        coordinator.complete_map_task(0, ["medium/mr-0-0.txt"])

        reduce_tasks = [coordinator.get_task() for _ in range(3)]

        self.assertEqual([t.task_id for t in reduce_tasks], [0, 1, 2])
        self.assertEqual(reduce_tasks[0].input_files, ("medium/mr-0-0.txt", "medium/mr-1-0.txt"))
        self.assertEqual(reduce_tasks[1].input_files, ())
        self.assertEqual(reduce_tasks[2].input_files, ("medium/mr-1-2.txt",))

    def test_malformed_paths_are_dropped(self):
        coordinator = Coordinator(["a.txt"], 2)
        drain_map_tasks(coordinator)

        with self.assertLogs('coordinator.job_manager', level='ERROR') as logs:
            coordinator.complete_map_task(0, ["medium/mr-0-1.txt", "medium/garbage.txt",
                                              "medium/mr-0-x.txt", "medium/mr-0-7.txt"])

        reduce_tasks = [coordinator.get_task() for _ in range(2)]
        self.assertEqual(reduce_tasks[0].input_files, ())
        self.assertEqual(reduce_tasks[1].input_files, ("medium/mr-0-1.txt",))
        self.assertEqual(len(logs.records), 3)

    def test_directory_dashes_do_not_confuse_parsing(self):
        coordinator = Coordinator(["a.txt"], 2)
        drain_map_tasks(coordinator)

        coordinator.complete_map_task(0, ["/tmp/my-work-dir/medium/mr-0-1.txt"])

        reduce_tasks = [coordinator.get_task() for _ in range(2)]
        self.assertEqual(reduce_tasks[1].input_files, ("/tmp/my-work-dir/medium/mr-0-1.txt",))

    def test_racing_completions_build_reduce_tasks_once(self):
        num_maps = 32
        coordinator = Coordinator([f"in-{i}.txt" for i in range(num_maps)], 4)
        tasks, _ = drain_map_tasks(coordinator)
        barrier = threading.Barrier(num_maps)

        def complete(task):
            barrier.wait()
            coordinator.complete_map_task(task.task_id, [f"medium/mr-{task.task_id}-{task.task_id % 4}.txt"])
            coordinator.complete_map_task(task.task_id, [])

        threads = [threading.Thread(target=complete, args=(t,)) for t in tasks]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertTrue(coordinator.is_map_phase_done())
        self.assertEqual(coordinator.map_tasks_completed, num_maps)
        # A second build would queue another set of reduce tasks
        self.assertEqual([t.task_id for t in coordinator.pending_reduce_tasks], [0, 1, 2, 3])
        for task in coordinator.pending_reduce_tasks:
            expected = tuple(f"medium/mr-{i}-{task.task_id}.txt" for i in range(task.task_id, num_maps, 4))
            self.assertEqual(task.input_files, expected)
        print("✓ Concurrent completion test passed")


class TestJobStatus(unittest.TestCase):
    """Progress reporting"""

    def test_job_status_tracking_and_progress(self):
        coordinator = Coordinator(["a.txt", "b.txt"], 2)
        drain_map_tasks(coordinator)

        status = coordinator.get_job_status()
        self.assertEqual(status['phase'], JobPhase.MAP.value)
        self.assertEqual(status['progress'], 0)
        self.assertEqual(status['map_total'], 2)
        self.assertEqual(status['reduce_total'], 2)

        coordinator.complete_map_task(0, [])
        self.assertEqual(coordinator.get_job_status()['progress'], 25)

        coordinator.complete_map_task(1, [])
        status = coordinator.get_job_status()
        self.assertEqual(status['phase'], JobPhase.REDUCE.value)
        self.assertEqual(status['pending_reduce'], 2)
        self.assertEqual(status['progress'], 50)

        coordinator.get_task()
        coordinator.get_task()
        coordinator.complete_reduce_task(0)
        coordinator.complete_reduce_task(1)
        status = coordinator.get_job_status()
        self.assertEqual(status['phase'], JobPhase.DONE.value)
        self.assertEqual(status['progress'], 100)


if __name__ == "__main__":
    unittest.main(verbosity=2)
