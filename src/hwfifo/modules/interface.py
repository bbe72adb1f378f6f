"""Port set shared by the FIFO controller and its pipeline adapters."""


class FIFOInterface:
    _doc_template = """
    {description}

    Parameters
    ----------
    width : int
        Bit width of data entries.
    capacity : int
        Number of entries held by the memory.
    nearly_empty : int
        Threshold below which ``nearly_empty`` is asserted (default 1).
    nearly_full : int or None
        Threshold at or above which ``nearly_full`` is asserted
        (default ``effective_capacity - 1``).
    overflow_check : bool
        Ignore ``wr`` while ``full`` (default True).
    underflow_check : bool
        Ignore ``rd`` while ``empty`` (default True).
    clear : bool
        Add a synchronous ``clear`` input.
    reset : bool
        Follow the clock domain reset instead of a ``clear`` input.
    reset_value : int or None
        Value of the registered ``q`` output after reset.
    ram_attrs : dict or None
        Synthesis attributes of the memory (default block RAM).
    domain : str
        Clock domain of the controller (default ``"sync"``).
    {parameters}

    Ports
    -----
    wr : Signal(), in
        Write strobe. Latches ``d`` into the queue.
    d : Signal(width), in
        Write data.
    rd : Signal(), in
        Read strobe. {rd_doc}
    q : Signal(width), out
        Read data. {q_doc}
    full : Signal(), out
        No space is left in the queue.
    empty : Signal(), out
        {empty_doc}
    nearly_full : Signal(), out
        Fill level is at or above the nearly-full threshold.
    nearly_empty : Signal(), out
        Fill level is below the nearly-empty threshold.
    used : Signal(range(effective_capacity + 1)), out
        Number of buffered entries{used_doc}.
    clear : Signal(), in
        Synchronous clear. Only present with the clear discipline.
    """

    def ports(self):
        ports = [
            self.wr, self.d, self.rd,
            self.q, self.full, self.empty,
            self.nearly_full, self.nearly_empty, self.used,
        ]
        if self.clear is not None:
            ports.append(self.clear)
        return ports
