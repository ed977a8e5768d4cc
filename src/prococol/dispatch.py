""" A serializing dispatcher: work submitted from any thread is executed one
    item at a time, in submission order, on a single background thread.

    Any object with a compatible :func:`submit` method can stand in for a
    :class:`Dispatcher`; a :class:`concurrent.futures.ThreadPoolExecutor`
    with exactly one worker satisfies the same contract.
"""

import concurrent.futures
import queue
import threading


class Dispatcher:
    """ Execute submitted callables sequentially on a dedicated daemon
        thread. The *name* is applied to the background thread.
    """

    def __init__(self, name='prococol-dispatch'):

        # A SimpleQueue is as fast as a deque plus a Condition, and a good
        # deal simpler.

        self.queue = queue.SimpleQueue()
        self.shutdown_lock = threading.Lock()
        self.stopped = False

        self.thread = threading.Thread(target=self.run, name=name)
        self.thread.daemon = True
        self.thread.start()


    def __enter__(self):
        return self


    def __exit__(self, *exc_info):
        self.shutdown(wait=True)


    def run(self):

        while True:
            work = self.queue.get()

            if work is None:
                break

            future, method, args, kwargs = work

            if not future.set_running_or_notify_cancel():
                continue

            try:
                result = method(*args, **kwargs)
            except BaseException as error:
                future.set_exception(error)
            else:
                future.set_result(result)


    def submit(self, method, *args, **kwargs):
        """ Queue *method* to be called with the remaining arguments. Returns
            a :class:`concurrent.futures.Future` for the eventual result.
        """

        with self.shutdown_lock:
            if self.stopped == True:
                raise RuntimeError('cannot submit work after shutdown')

            future = concurrent.futures.Future()
            self.queue.put((future, method, args, kwargs))

        return future


    def shutdown(self, wait=True):
        """ Stop accepting new work. Anything already queued still runs; if
            *wait* is True, block until it has.
        """

        with self.shutdown_lock:
            if self.stopped == False:
                self.stopped = True
                self.queue.put(None)

        if wait and threading.current_thread() is not self.thread:
            self.thread.join()


# end of class Dispatcher


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
