"""Graph network components: nodes, linear edges, activations and Verilog-A emitters."""